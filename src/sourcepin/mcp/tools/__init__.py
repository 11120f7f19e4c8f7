"""MCP tool registrations."""

__all__ = [
    "annotation",
    "editing",
]
