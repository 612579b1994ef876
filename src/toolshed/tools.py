"""Tool and resource catalog for the knowledge base, independent of transport.

Both the MCP server and the HTTP app call into `ToolRegistry`; it owns
argument handling, JSON rendering, and the rule that a failing tool call is
reported back as an error response rather than raised.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable

from .errors import ResourceNotFoundError, ToolArgumentError, UnknownToolError
from .graph.context import build_context
from .graph.extract import extract
from .kb.search import search
from .kb.store import KnowledgeBase, KnowledgeStore


logger = logging.getLogger(__name__)

SECTION_CHOICES = ["faq", "sessions", "triggers", "safety", "transcripts", "all"]

STRUCTURED_URI = "kb://data/structured"

SEMANTIC_SEARCH_NOTICE = "Semantic search using simple keyword matching (embeddings not implemented)"


@dataclass(frozen=True)
class ResourceSpec:
    uri: str
    name: str
    description: str
    mime_type: str
    section: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"uri": self.uri, "mimeType": self.mime_type, "name": self.name, "description": self.description}


@dataclass(frozen=True)
class ResourceContents:
    uri: str
    mime_type: str
    text: str


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    input_schema: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "description": self.description, "inputSchema": self.input_schema}


@dataclass(frozen=True)
class ToolResponse:
    text: str
    is_error: bool = False
    payload: dict[str, Any] | None = None


RESOURCES: list[ResourceSpec] = [
    ResourceSpec(
        uri=STRUCTURED_URI,
        name="Structured Knowledge Base",
        description="The full knowledge-base document as JSON",
        mime_type="application/json",
    ),
    ResourceSpec(uri="kb://data/faq", name="FAQ", description="Frequently Asked Questions", mime_type="text/plain", section="faq"),
    ResourceSpec(uri="kb://data/sessions", name="Session Index", description="Index of sessions", mime_type="text/plain", section="sessions"),
    ResourceSpec(uri="kb://data/triggers", name="Triggers", description="Triggers documentation", mime_type="text/plain", section="triggers"),
    ResourceSpec(uri="kb://data/safety", name="Safety Information", description="Risks, safety and advice", mime_type="text/plain", section="safety"),
]

_SECTION_PROP = {"type": "string", "enum": SECTION_CHOICES}

TOOLS: list[ToolSpec] = [
    ToolSpec(
        name="rag_query",
        description="Keyword search over the knowledge base, returning excerpts around the first match per section",
        input_schema={
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "The query to search for in the knowledge base"},
                "section": {**_SECTION_PROP, "description": "Which section to search (default: all)"},
                "max_results": {"type": "number", "description": "Maximum number of results to return", "default": 5},
            },
            "required": ["query"],
        },
    ),
    ToolSpec(
        name="cag_context",
        description="List the knowledge-base sections that mention an entity",
        input_schema={
            "type": "object",
            "properties": {
                "entity": {"type": "string", "description": "Entity to build context around (e.g., trigger name, session name)"},
                "depth": {"type": "number", "description": "Depth of relationship traversal", "default": 2},
            },
            "required": ["entity"],
        },
    ),
    ToolSpec(
        name="extract_entities",
        description="Extract named entities from knowledge-base content",
        input_schema={
            "type": "object",
            "properties": {"section": {**_SECTION_PROP, "description": "Which section to extract from"}},
            "required": ["section"],
        },
    ),
    ToolSpec(
        name="semantic_search",
        description="Search across the knowledge base (keyword matching; no embeddings)",
        input_schema={
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "Search query"},
                "threshold": {"type": "number", "description": "Similarity threshold (0-1)", "default": 0.7},
            },
            "required": ["query"],
        },
    ),
    ToolSpec(
        name="get_metadata",
        description="Get metadata about the knowledge base",
        input_schema={"type": "object", "properties": {}},
    ),
]


def _require(args: dict[str, Any], name: str) -> Any:
    value = args.get(name)
    if value is None:
        raise ToolArgumentError(f"Missing required argument: {name}")
    return value


def _require_str(args: dict[str, Any], name: str) -> str:
    value = _require(args, name)
    if not isinstance(value, str):
        raise ToolArgumentError(f"Argument {name} must be a string")
    return value


def rag_query(kb: KnowledgeBase, args: dict[str, Any]) -> dict[str, Any]:
    query = _require_str(args, "query")
    section = args.get("section")
    section = "all" if section is None else str(section)
    max_results = args.get("max_results")
    max_results = 5 if max_results is None else int(max_results)

    outcome = search(kb, query, section=section, max_results=max_results)
    return {
        "query": query,
        "results": [h.to_dict() for h in outcome.results],
        "total_found": outcome.total_found,
        "rag_method": "keyword_search",
    }


def cag_context(kb: KnowledgeBase, args: dict[str, Any]) -> dict[str, Any]:
    entity = _require_str(args, "entity")
    depth = args.get("depth")
    return build_context(kb, entity, depth=2 if depth is None else depth).to_dict()


def extract_entities(kb: KnowledgeBase, args: dict[str, Any]) -> dict[str, Any]:
    section = _require_str(args, "section")
    outcome = extract(kb, section)
    return {
        "section": outcome.section,
        "entities": [e.to_dict() for e in outcome.entities],
        "total_extracted": outcome.total_extracted,
    }


def semantic_search(kb: KnowledgeBase, args: dict[str, Any]) -> dict[str, Any]:
    query = _require_str(args, "query")
    # Accepted for interface compatibility; results are never filtered by it.
    threshold = args.get("threshold")
    return {
        "query": query,
        "threshold": 0.7 if threshold is None else threshold,
        "message": SEMANTIC_SEARCH_NOTICE,
        "results": rag_query(kb, {"query": query, "max_results": 5}),
    }


def _length(value: Any) -> int | float:
    # Missing or non-numeric lengths count as 0.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value


def get_metadata(kb: KnowledgeBase, args: dict[str, Any]) -> dict[str, Any]:
    return {
        "metadata": kb.metadata,
        "sections": kb.section_names(),
        "total_content_length": sum(_length(s.full_length) for s in kb.iter_sections()),
        "rag_status": kb.raw.get("rag_vectors") or {},
        "cag_status": kb.raw.get("cag_context") or {},
    }


HANDLERS: dict[str, Callable[[KnowledgeBase, dict[str, Any]], dict[str, Any]]] = {
    "rag_query": rag_query,
    "cag_context": cag_context,
    "extract_entities": extract_entities,
    "semantic_search": semantic_search,
    "get_metadata": get_metadata,
}


def render(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


class ToolRegistry:
    def __init__(self, store: KnowledgeStore):
        self.store = store

    def list_resources(self) -> list[ResourceSpec]:
        return list(RESOURCES)

    def list_tools(self) -> list[ToolSpec]:
        return list(TOOLS)

    def read_resource(self, uri: str, kb: KnowledgeBase | None = None) -> ResourceContents:
        if kb is None:
            kb = self.store.load()
        res_spec = next((r for r in RESOURCES if r.uri == uri), None)
        if res_spec is None:
            raise ResourceNotFoundError(uri)

        if res_spec.section is None:
            return ResourceContents(uri=uri, mime_type=res_spec.mime_type, text=render(kb.raw))

        section = kb.section(res_spec.section)
        if section is None:
            raise ResourceNotFoundError(uri)
        return ResourceContents(uri=uri, mime_type=res_spec.mime_type, text=section.text)

    def call_tool(self, name: str, args: dict[str, Any] | None = None, kb: KnowledgeBase | None = None) -> ToolResponse:
        """Run a tool by name. Never raises: failures come back with `is_error=True`."""
        try:
            if kb is None:
                kb = self.store.load()
            handler = HANDLERS.get(name)
            if handler is None:
                raise UnknownToolError(name)
            payload = handler(kb, dict(args or {}))
        except Exception as e:
            logger.warning("Tool %s failed: %s", name, e)
            return ToolResponse(text=f"Error: {e}", is_error=True)

        return ToolResponse(text=render(payload), payload=payload)
