"""
File Set Merger

Combines a project's files with newly extracted ones. Incoming files
overwrite existing files at the same path; nothing is ever deleted.
"""


def normalize_path(path: str) -> str:
    """Give a path exactly one leading slash ("App.tsx" -> "/App.tsx")."""
    return "/" + path.lstrip("/")


def normalize_files(files: dict[str, str]) -> dict[str, str]:
    """Re-key a FileSet by normalized path. Later keys win on collision."""
    return {normalize_path(path): content for path, content in files.items()}


def merge_files(existing: dict[str, str], incoming: dict[str, str]) -> dict[str, str]:
    """
    Merge incoming files over existing ones.

    Args:
        existing: Current project files
        incoming: Files extracted from the latest reply

    Returns:
        New FileSet; neither argument is modified.
    """
    merged = normalize_files(existing)
    merged.update(normalize_files(incoming))
    return merged
