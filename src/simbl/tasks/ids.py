# src/simbl/tasks/ids.py

from __future__ import annotations

import re
from collections.abc import Iterable

from .document import get_all_tasks
from .task_models import SimblFile

_ID_NUMBER_RE = re.compile(r"-(\d+)$")
_ARCHIVE_ID_RE = re.compile(r"^## ([a-zA-Z0-9-]+)", re.MULTILINE)
_GENERIC_ID_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9]*-\d+$")


def extract_id_number(task_id: str) -> int | None:
    """Numeric suffix of an id: "task-42" -> 42, "abc" -> None."""
    m = _ID_NUMBER_RE.search(task_id)
    return int(m.group(1)) if m else None


def find_max_id_number(ids: Iterable[str]) -> int:
    nums = [n for n in (extract_id_number(i) for i in ids) if n is not None]
    return max(nums, default=0)


def next_id(prefix: str, file: SimblFile, archive_text: str | None = None) -> str:
    """
    Next free `<prefix>-N` across live tasks and the archive.

    Archived tasks are only scanned for `## <id>` lines; the archive is not
    required to be a valid tasks document.
    """
    ids = [t.id for t in get_all_tasks(file)]
    if archive_text:
        ids.extend(_ARCHIVE_ID_RE.findall(archive_text))
    return f"{prefix}-{find_max_id_number(ids) + 1}"


def is_valid_id(task_id: str, prefix: str | None = None) -> bool:
    if prefix:
        return re.fullmatch(rf"{re.escape(prefix)}-\d+", task_id) is not None
    return _GENERIC_ID_RE.match(task_id) is not None
