# src/simbl/core/__init__.py
