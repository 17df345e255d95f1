"""Interactive history search dialog and its state machine."""

__all__ = [
    "dialog",
    "dispatcher",
    "navigation",
    "preferences",
    "viewport",
]
