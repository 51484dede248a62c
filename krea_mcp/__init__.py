"""
Krea Image MCP Server

MCP server that exposes Krea AI image generation and Topaz enhance jobs
as tools, built on FastMCP with a declarative model catalog.
"""

__version__ = "0.1.0"

try:
    import importlib.metadata

    __version__ = importlib.metadata.version("krea-mcp")
except (importlib.metadata.PackageNotFoundError, ImportError):
    # Fallback for development mode
    pass

__all__ = ["__version__"]
