"""Top-level package for the histsearch fuzzy history picker."""

__version__ = "0.1.0"

__all__ = [
    "history",
    "search",
    "shell",
    "utils",
]
