"""Stash data model, clustering, SQLite storage, similarity search and verdict diffs."""