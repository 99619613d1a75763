# src/simbl/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the Markdown tokenizer and project-config storage swappable
and makes testing easier.
"""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..markdown.blocks import Block
    from ..project_config import ProjectConfig


class BlockCodec(Protocol):
    """Markdown text <-> ordered top-level blocks."""
    def tokenize(self, text: str) -> list[Block]: ...
    def render(self, blocks: list[Block]) -> str: ...


class ProjectConfigStore(Protocol):
    """
    Where the per-project config lives.

    Migration only reads/writes `log_version`, but save() must keep every
    other key it was given.
    """

    def load(self) -> ProjectConfig: ...
    def save(self, config: ProjectConfig) -> None: ...
