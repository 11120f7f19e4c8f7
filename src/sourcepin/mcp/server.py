"""FastMCP server setup and tool registration."""
from fastmcp import FastMCP

from .tools import annotation, editing

mcp = FastMCP("sourcepin")


def create_server():
    """Create and configure the MCP server."""
    # Annotation and lookup tools
    annotation.register(mcp)

    # Source edits from the visual editor
    editing.register(mcp)

    return mcp


def run_server():
    """Run the MCP server."""
    server = create_server()
    server.run(show_banner=False)
