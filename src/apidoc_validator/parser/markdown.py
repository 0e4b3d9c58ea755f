"""Markdown tokenizer.

Uses markdown-it-py to turn documentation text into the ordered list of
top-level blocks (headings, paragraphs, comments, code blocks, tables)
and the links found anywhere in the document.
"""

import re

from markdown_it import MarkdownIt
from markdown_it.common.utils import normalizeReference
from markdown_it.token import Token

from apidoc_validator.parser.base import Block, BlockKind, LinkRef

# Full and collapsed reference links: [text][id] and [text][]
REFERENCE_LINK_RE = re.compile(r"(?<![!\]\\])\[([^\[\]]+)\]\[([^\[\]]*)\]")
CODE_BRACKETS_RE = re.compile(r"[\[\]]")


def tokenize(text: str) -> tuple[list[Block], list[LinkRef]]:
    """Parse Markdown text into blocks and links."""
    md = MarkdownIt("commonmark").enable("table")
    env: dict = {}
    tokens = md.parse(text, env)
    references = env.get("references", {})

    blocks = _collect_blocks(tokens)
    links = _collect_links(tokens, references)
    return blocks, links


def _collect_blocks(tokens: list[Token]) -> list[Block]:
    blocks: list[Block] = []

    def add(kind: BlockKind, content: str, token: Token, **fields) -> None:
        blocks.append(
            Block(
                kind=kind,
                content=content,
                index=len(blocks),
                line_number=_line_number(token),
                **fields,
            )
        )

    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token.level != 0:
            i += 1
            continue

        if token.type == "heading_open":
            add(BlockKind.HEADING, _inline_content(tokens, i + 1), token, level=int(token.tag[1:]))
        elif token.type == "paragraph_open":
            add(BlockKind.PARAGRAPH, _inline_content(tokens, i + 1), token)
        elif token.type == "html_block":
            # Only HTML comments carry annotations; other raw HTML is not a block we interpret
            if token.content.lstrip().startswith("<!--"):
                add(BlockKind.COMMENT, token.content, token)
        elif token.type in ("fence", "code_block"):
            language = token.info.strip() or None
            add(BlockKind.CODE_BLOCK, token.content, token, language=language)
        elif token.type == "table_open":
            header, rows, i = _collect_table(tokens, i)
            content = "\n".join(" | ".join(row) for row in [header, *rows])
            add(BlockKind.TABLE, content, token, table_header=header, table_rows=rows)
        i += 1

    return blocks


def _collect_table(tokens: list[Token], start: int) -> tuple[list[str], list[list[str]], int]:
    """Read cells from table_open up to table_close; returns the index of table_close."""
    header: list[str] = []
    rows: list[list[str]] = []
    current: list[str] | None = None
    in_head = False

    i = start + 1
    while i < len(tokens) and tokens[i].type != "table_close":
        token = tokens[i]
        if token.type == "thead_open":
            in_head = True
        elif token.type == "thead_close":
            in_head = False
        elif token.type == "tr_open":
            current = []
        elif token.type == "tr_close" and current is not None:
            if in_head:
                header = current
            else:
                rows.append(current)
            current = None
        elif token.type == "inline" and current is not None:
            current.append(token.content.strip())
        i += 1

    return header, rows, i


def _collect_links(tokens: list[Token], references: dict) -> list[LinkRef]:
    links: list[LinkRef] = []
    for token in tokens:
        if token.type != "inline":
            continue
        line_number = _line_number(token)
        children = token.children or []

        for j, child in enumerate(children):
            if child.type == "link_open":
                links.append(
                    LinkRef(
                        link_text=_link_text(children, j),
                        target_url=str(child.attrGet("href") or ""),
                        line_number=line_number,
                    )
                )
            elif child.type == "image":
                links.append(
                    LinkRef(
                        link_text=child.content or "",
                        target_url=str(child.attrGet("src") or ""),
                        line_number=line_number,
                    )
                )

        for match in REFERENCE_LINK_RE.finditer(_plain_text(children)):
            link_text, label = match.group(1), match.group(2)
            reference_id = label or link_text
            if normalizeReference(reference_id) in references:
                continue
            links.append(
                LinkRef(
                    link_text=link_text,
                    target_url=None,
                    reference_id=reference_id,
                    resolved=False,
                    line_number=line_number,
                )
            )
    return links


def _link_text(children: list[Token], open_index: int) -> str:
    """Concatenate the text between a link_open and its link_close."""
    parts = []
    for child in children[open_index + 1:]:
        if child.type == "link_close":
            break
        if child.type in ("text", "code_inline"):
            parts.append(child.content)
    return "".join(parts)


def _plain_text(children: list[Token]) -> str:
    """Inline text with code spans reduced to bracket-free text."""
    parts = []
    for child in children:
        if child.type == "text":
            parts.append(child.content)
        elif child.type == "code_inline":
            parts.append(CODE_BRACKETS_RE.sub("", child.content))
        elif child.type in ("softbreak", "hardbreak"):
            parts.append("\n")
    return "".join(parts)


def _inline_content(tokens: list[Token], index: int) -> str:
    if index < len(tokens) and tokens[index].type == "inline":
        return tokens[index].content
    return ""


def _line_number(token: Token) -> int:
    return token.map[0] + 1 if token.map else 1
