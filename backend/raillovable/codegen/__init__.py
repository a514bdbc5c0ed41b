# Code generation artifacts
from .extractor import extract_files, iter_fenced_blocks, DEFAULT_ENTRY_PATH
from .merger import merge_files, normalize_path

__all__ = [
    "extract_files",
    "iter_fenced_blocks",
    "DEFAULT_ENTRY_PATH",
    "merge_files",
    "normalize_path",
]
