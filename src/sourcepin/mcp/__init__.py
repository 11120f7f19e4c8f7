"""MCP server exposing annotation and source-edit tools."""
from .server import create_server, run_server

__all__ = ["create_server", "run_server"]
