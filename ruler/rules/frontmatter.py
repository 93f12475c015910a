"""Split a rule document into its frontmatter block and markdown body."""

from __future__ import annotations

from typing import Optional

from ruler.constants import FRONTMATTER_DELIMITER
from ruler.rules.models import RawDocument


def _is_delimiter(line: str) -> bool:
    return line.strip() == FRONTMATTER_DELIMITER


def _first_content_line(lines: list[str]) -> Optional[int]:
    for index, line in enumerate(lines):
        if line.strip():
            return index
    return None


def split_frontmatter(text: str) -> RawDocument:
    """Return the metadata block and body of ``text``.

    A document without an opening delimiter, or whose opening delimiter is
    never closed, is all body. At most one blank line after the closing
    delimiter is dropped from the body; everything else is kept verbatim.
    """
    lines = text.splitlines(keepends=True)
    start = _first_content_line(lines)
    if start is None or not _is_delimiter(lines[start]):
        return RawDocument(metadata_text=None, body=text)

    for index in range(start + 1, len(lines)):
        if not _is_delimiter(lines[index]):
            continue
        metadata = "".join(lines[start + 1 : index])
        rest = lines[index + 1 :]
        if rest and not rest[0].strip():
            rest = rest[1:]
        return RawDocument(metadata_text=metadata, body="".join(rest))

    return RawDocument(metadata_text=None, body=text)
