"""Tokenizer output models for Markdown documentation.

The Markdown tokenizer converts a document into an ordered list of
blocks plus the links found in it. Everything downstream reads these
models and never mutates them.
"""

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict

STYLED_HEADING_RE = re.compile(r"^(\*\*|__)([^*_]+)\1:?$")


class BlockKind(str, Enum):
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    COMMENT = "comment"
    CODE_BLOCK = "code_block"
    TABLE = "table"


class Block(BaseModel):
    """A single top-level structural unit of a Markdown document."""

    model_config = ConfigDict(frozen=True)

    kind: BlockKind
    content: str
    index: int
    level: int = 0  # heading level, 0 for non-headings
    language: str | None = None  # fenced code info string
    table_header: list[str] = []
    table_rows: list[list[str]] = []
    line_number: int = 1

    @property
    def is_header_like(self) -> bool:
        """Headings, and paragraphs that are nothing but bold text (``**Path parameters**``)."""
        if self.kind is BlockKind.HEADING:
            return True
        if self.kind is BlockKind.PARAGRAPH:
            return bool(STYLED_HEADING_RE.match(self.content.strip()))
        return False

    @property
    def header_text(self) -> str:
        text = self.content.strip()
        match = STYLED_HEADING_RE.match(text)
        if self.kind is BlockKind.PARAGRAPH and match:
            return match.group(2).strip()
        return text


class LinkRef(BaseModel):
    """A hyperlink or image reference found in a document.

    ``resolved`` is False for reference-style links (``[text][id]``) whose
    id has no matching definition; ``target_url`` is None in that case.
    """

    link_text: str
    target_url: str | None
    reference_id: str | None = None
    resolved: bool = True
    line_number: int = 1
