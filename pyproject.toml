[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vectorpad"
version = "0.1.0"
description = "Idea stash model with token clustering, SQLite storage, embedding similarity search, verdict diffs and terminal-panel building blocks."
requires-python = ">=3.10"
dependencies = []
keywords = ["stash", "clustering", "jaccard", "cosine-similarity", "sqlite", "terminal"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Processing :: General",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["vectorpad"]

[tool.hatch.build.targets.sdist]
include = ["vectorpad", "tests", "pyproject.toml", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"
