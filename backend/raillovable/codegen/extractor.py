"""
Code Block Extractor

Turns a model reply into a FileSet by reading its fenced code blocks.

Grammar, scanned left to right:
1. ``` opens a block. The rest of its line is the info string; an info
   string containing a backtick means this ``` is not an opener and the
   scan resumes one character later.
2. The body runs up to the next ```, wherever it appears (shortest
   match, mid-line included). Scanning resumes after that closing ```.
   Blocks do not nest; a block left open at the end is dropped.
3. The info string is "<language>:<filename>" or a bare "<filename>".
   A leading "\\w+:" token is removed and the rest is the candidate.
4. A candidate is a path only if it contains "." or "/", so bare
   language tags like "tsx" or "bash" never become files.
5. When no block names a file, the first block whose trimmed body is
   longer than 50 characters becomes the default entry file.
"""
import logging
import re
from dataclasses import dataclass
from typing import Iterator, Optional

logger = logging.getLogger(__name__)

FENCE = "```"

# Conventional entry component of the generated React app
DEFAULT_ENTRY_PATH = "/App.tsx"

# Unnamed blocks at or below this length are treated as snippets
FALLBACK_MIN_LENGTH = 50

_LANGUAGE_PREFIX = re.compile(r"^\w+:")


@dataclass(frozen=True)
class FencedBlock:
    """A fenced region of a reply."""
    info: str
    body: str

    @property
    def filename(self) -> Optional[str]:
        """The file path named by the info string, if any."""
        candidate = self.info.strip()
        prefix = _LANGUAGE_PREFIX.match(candidate)
        if prefix:
            candidate = candidate[prefix.end():]
        candidate = candidate.strip()
        if candidate and ("." in candidate or "/" in candidate):
            return candidate
        return None

    @property
    def content(self) -> str:
        return self.body.strip()


def iter_fenced_blocks(text: str) -> Iterator[FencedBlock]:
    """Yield fenced blocks in the order they appear."""
    pos = 0
    while True:
        # Seeking an opening fence
        start = text.find(FENCE, pos)
        if start < 0:
            return

        # Reading the info string
        info_start = start + len(FENCE)
        newline = text.find("\n", info_start)
        if newline < 0:
            return
        info = text[info_start:newline]
        if "`" in info:
            pos = start + 1
            continue

        # Capturing the body
        close = text.find(FENCE, newline + 1)
        if close < 0:
            logger.debug(f"Dropping unterminated code block (info={info.strip()!r})")
            return
        yield FencedBlock(info=info, body=text[newline + 1:close])
        pos = close + len(FENCE)


def extract_files(text: str) -> dict[str, str]:
    """
    Extract the files named in a reply.

    Args:
        text: Raw model output

    Returns:
        FileSet keyed by the filename as written (not normalized).
        Empty when the reply carries no code.
    """
    blocks = list(iter_fenced_blocks(text))
    files: dict[str, str] = {}

    for block in blocks:
        filename = block.filename
        if filename is not None:
            files[filename] = block.content

    if files:
        return files

    for block in blocks:
        if len(block.content) > FALLBACK_MIN_LENGTH:
            logger.debug(f"No named files; using an unnamed block as {DEFAULT_ENTRY_PATH}")
            files[DEFAULT_ENTRY_PATH] = block.content
            break

    return files
