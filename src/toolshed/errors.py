from __future__ import annotations


class ToolshedError(Exception):
    pass


class UnknownToolError(ToolshedError):
    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class ToolArgumentError(ToolshedError, ValueError):
    pass


class ResourceNotFoundError(ToolshedError, LookupError):
    def __init__(self, uri: str):
        super().__init__(f"Resource not found: {uri}")
        self.uri = uri
