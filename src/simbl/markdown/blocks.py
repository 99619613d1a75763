# src/simbl/markdown/blocks.py

"""
Top-level Markdown blocks on top of markdown-it-py.

Only four kinds matter to the task document: headings, paragraphs,
thematic breaks and everything else (lists, code, quotes, html...).
Each block keeps the exact source lines it came from, so rendering a
block list re-emits content verbatim instead of re-printing an AST.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum

from markdown_it import MarkdownIt
from markdown_it.token import Token

from ..core.errors import DocumentParseError

logger = logging.getLogger(__name__)


class BlockKind(StrEnum):
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    THEMATIC_BREAK = "thematic_break"
    OTHER = "other"


@dataclass(slots=True)
class Block:
    kind: BlockKind
    raw: str
    # Inline source for headings/paragraphs, "" otherwise.
    text: str = ""
    # 1..6 for headings, 0 otherwise.
    depth: int = 0
    # Paragraphs only: type of the first inline token ("text", "link_open", ...)
    # and the concatenated plain-text runs.
    first_inline: str = ""
    plain: str = ""


_OPENING_KINDS = {
    "heading_open": BlockKind.HEADING,
    "paragraph_open": BlockKind.PARAGRAPH,
    "hr": BlockKind.THEMATIC_BREAK,
}


def _normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


class MarkdownBlockCodec:
    """
    BlockCodec backed by markdown-it-py (CommonMark preset).

    Source lines that markdown-it consumes without emitting a token
    (link reference definitions) are kept as OTHER blocks so nothing is
    dropped on a parse/render cycle.
    """

    def __init__(self, md: MarkdownIt | None = None) -> None:
        self._md = md or MarkdownIt("commonmark")

    def tokenize(self, text: str) -> list[Block]:
        if not isinstance(text, str):
            raise DocumentParseError(f"expected markdown text, got {type(text).__name__}")

        src = _normalize_newlines(text)
        try:
            tokens = self._md.parse(src)
        except Exception as exc:
            raise DocumentParseError(f"markdown tokenizer failed: {exc}") from exc

        lines = src.split("\n")
        blocks: list[Block] = []
        cursor = 0

        for i, tok in enumerate(tokens):
            if tok.level != 0 or tok.nesting == -1 or tok.map is None:
                continue

            start, end = tok.map
            if start > cursor:
                self._keep_gap(lines[cursor:start], blocks)
            cursor = max(cursor, end)

            raw = "\n".join(lines[start:end]).rstrip()
            kind = _OPENING_KINDS.get(tok.type, BlockKind.OTHER)

            if kind is BlockKind.HEADING:
                inline = tokens[i + 1] if i + 1 < len(tokens) else None
                text_ = inline.content.strip() if inline is not None and inline.type == "inline" else ""
                blocks.append(Block(kind, raw, text=text_, depth=int(tok.tag[1:])))
            elif kind is BlockKind.PARAGRAPH:
                inline = tokens[i + 1] if i + 1 < len(tokens) else None
                blocks.append(self._paragraph(raw, inline))
            else:
                blocks.append(Block(kind, raw))

        if cursor < len(lines):
            self._keep_gap(lines[cursor:], blocks)

        logger.debug("Tokenized %d lines into %d blocks", len(lines), len(blocks))
        return blocks

    @staticmethod
    def _paragraph(raw: str, inline: Token | None) -> Block:
        if inline is None or inline.type != "inline":
            return Block(BlockKind.PARAGRAPH, raw)
        children = inline.children or []
        return Block(
            BlockKind.PARAGRAPH,
            raw,
            text=inline.content,
            first_inline=children[0].type if children else "",
            plain="".join(c.content for c in children if c.type == "text"),
        )

    @staticmethod
    def _keep_gap(gap: list[str], blocks: list[Block]) -> None:
        raw = "\n".join(gap).strip("\n").rstrip()
        if raw.strip():
            blocks.append(Block(BlockKind.OTHER, raw))

    def render(self, blocks: list[Block]) -> str:
        return "\n\n".join(b.raw for b in blocks if b.raw)


_DEFAULT_CODEC = MarkdownBlockCodec()


def default_codec() -> MarkdownBlockCodec:
    return _DEFAULT_CODEC
