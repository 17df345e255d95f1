"""Shared helpers for logging and Rich rendering."""

__all__ = ["logging", "rich_render"]
