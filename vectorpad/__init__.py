"""Idea stash model, clustering, SQLite storage and terminal-panel building blocks."""

__version__ = "0.1.0"