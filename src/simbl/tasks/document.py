# src/simbl/tasks/document.py

"""
tasks.md <-> SimblFile.

Grammar (on top of top-level Markdown blocks):
- `# Backlog` / `# Done` (case-insensitive) open a section
- `## <id> <title>` starts a task
- a paragraph right after the task heading that starts with a plain `[`
  (not a link) is the tag line
- every following block up to the next H1/H2 is the task content, kept verbatim

Anything before the first H1 is the preamble. H2 headings under an
unrecognised H1 are ignored here and reported by the doctor pass.
"""

from __future__ import annotations

import logging

from ..core.ports import BlockCodec
from ..markdown.blocks import Block, BlockKind, default_codec
from .tags import derive_status, fold, format_tag_line, parse_tag_line
from .task_models import Section, SimblFile, Task

logger = logging.getLogger(__name__)

_SECTION_HEADINGS = {"backlog": Section.BACKLOG, "done": Section.DONE}


def _parse_task_heading(text: str) -> tuple[str, str]:
    """Format: "task-1 Optional title here"."""
    parts = text.strip().split(None, 1)
    if not parts:
        return "", ""
    if len(parts) == 1:
        return parts[0], ""
    return parts[0], parts[1].strip()


def _is_tag_line(block: Block) -> bool:
    """A paragraph whose first inline token is plain text starting with `[` (never a link)."""
    if block.kind is not BlockKind.PARAGRAPH or block.first_inline != "text":
        return False
    return block.plain.lstrip().startswith("[")


def _next_heading_index(blocks: list[Block], start: int, max_depth: int) -> int:
    for i in range(start, len(blocks)):
        b = blocks[i]
        if b.kind is BlockKind.HEADING and b.depth <= max_depth:
            return i
    return len(blocks)


def parse(text: str, *, codec: BlockCodec | None = None) -> SimblFile:
    """
    Parse tasks.md.

    Raises DocumentParseError if the text cannot be tokenized; a partial
    SimblFile is never returned.
    """
    codec = codec or default_codec()
    blocks = codec.tokenize(text)

    result = SimblFile()

    first_h1 = next(
        (i for i, b in enumerate(blocks) if b.kind is BlockKind.HEADING and b.depth == 1),
        None,
    )
    # No H1 at all: keep everything as preamble rather than dropping it.
    preamble_blocks = blocks if first_h1 is None else blocks[:first_h1]
    result.preamble = codec.render(preamble_blocks).strip("\n") or None

    section: Section | None = None
    i = 0
    while i < len(blocks):
        block = blocks[i]

        if block.kind is BlockKind.HEADING and block.depth == 1:
            section = _SECTION_HEADINGS.get(block.text.strip().lower())
            if section is None:
                logger.debug("Ignoring unknown section heading %r", block.text)
            i += 1
            continue

        if block.kind is BlockKind.HEADING and block.depth == 2 and section is not None:
            task_id, title = _parse_task_heading(block.text)

            tags: list[str] = []
            content_start = i + 1
            if content_start < len(blocks) and _is_tag_line(blocks[content_start]):
                tags = parse_tag_line(blocks[content_start].plain)
                content_start += 1

            content_end = _next_heading_index(blocks, content_start, 2)
            # Keep leading indentation: the first block may be an indented code block.
            content = codec.render(blocks[content_start:content_end]).strip("\n")

            reserved = fold(tags)
            result.section_tasks(section).append(
                Task(
                    id=task_id,
                    title=title,
                    tags=tags,
                    reserved=reserved,
                    status=derive_status(section, reserved),
                    content=content,
                    section=section,
                )
            )
            i = content_end
            continue

        i += 1

    logger.debug("Parsed document backlog=%d done=%d", len(result.backlog), len(result.done))
    return result


def _serialize_task(task: Task, lines: list[str]) -> None:
    lines.append(f"## {task.id}{' ' + task.title if task.title else ''}")
    lines.append("")

    if task.tags:
        lines.append(format_tag_line(task.tags))
        lines.append("")

    if task.content:
        lines.append(task.content)
        lines.append("")


def serialize(file: SimblFile) -> str:
    lines: list[str] = []

    if file.preamble:
        lines.append(file.preamble)
        lines.append("")

    lines.append("# Backlog")
    lines.append("")
    for task in file.backlog:
        _serialize_task(task, lines)

    lines.append("# Done")
    lines.append("")
    for task in file.done:
        _serialize_task(task, lines)

    return "\n".join(lines).rstrip() + "\n"


def get_all_tasks(file: SimblFile) -> list[Task]:
    return [*file.backlog, *file.done]


def find_task_by_id(file: SimblFile, task_id: str) -> Task | None:
    for task in get_all_tasks(file):
        if task.id == task_id:
            return task
    return None
