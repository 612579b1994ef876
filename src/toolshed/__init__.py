"""Static knowledge-base tools (keyword search, entity extraction, context) over MCP."""

__version__ = "0.1.0"
