# src/simbl/markdown/__init__.py

from .blocks import Block, BlockKind, MarkdownBlockCodec, default_codec

__all__ = ["Block", "BlockKind", "MarkdownBlockCodec", "default_codec"]
