# src/simbl/__init__.py

"""simbl: file-backed Markdown task tracker (document model, tags, relations, task log)."""

__version__ = "0.3.0"
