from typing import Any


def create_app(*, data_path: str | None = None):
    # Lazy import so the MCP server and CLI work without web deps.
    from fastapi import Body, FastAPI
    from fastapi.responses import JSONResponse

    from .. import __version__
    from ..config import Settings
    from ..errors import ResourceNotFoundError
    from ..kb.store import KnowledgeStore
    from ..tools import ToolRegistry

    settings = Settings()
    store = KnowledgeStore(data_path or settings.data_path)
    registry = ToolRegistry(store)

    app = FastAPI(title="LLM Toolshed", version=__version__)
    app.state.registry = registry

    @app.get("/api/health")
    def health():
        kb = store.load()
        return {
            "ok": kb.available,
            "data_path": str(store.resolved_path()),
            "sections": kb.section_names(),
        }

    @app.get("/api/resources")
    def resources():
        return {"ok": True, "resources": [r.to_dict() for r in registry.list_resources()]}

    @app.get("/api/resource")
    def resource(uri: str):
        try:
            res = registry.read_resource(uri)
        except ResourceNotFoundError as e:
            return JSONResponse({"ok": False, "error": str(e)}, status_code=404)
        return {"ok": True, "uri": res.uri, "mimeType": res.mime_type, "text": res.text}

    @app.get("/api/tools")
    def tools():
        return {"ok": True, "tools": [t.to_dict() for t in registry.list_tools()]}

    @app.post("/api/tools/{name}")
    def call_tool(name: str, payload: dict[str, Any] | None = Body(default=None)):
        resp = registry.call_tool(name, payload or {})
        return {"ok": not resp.is_error, "is_error": resp.is_error, "text": resp.text, "result": resp.payload}

    return app
