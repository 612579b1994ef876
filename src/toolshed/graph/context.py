from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..kb.store import KnowledgeBase


MENTION_RELEVANCE = 0.8


@dataclass(frozen=True)
class Relationship:
    type: str
    target: str
    relevance: float


@dataclass(frozen=True)
class Context:
    entity: str
    depth: int | float
    relationships: list[Relationship] = field(default_factory=list)
    related_entities: list[str] = field(default_factory=list)

    @property
    def context_summary(self) -> str:
        return f'Context for "{self.entity}" built from knowledge base'

    def to_dict(self) -> dict[str, Any]:
        return {
            "entity": self.entity,
            "depth": self.depth,
            "relationships": [
                {"type": r.type, "target": r.target, "relevance": r.relevance} for r in self.relationships
            ],
            "related_entities": list(self.related_entities),
            "context_summary": self.context_summary,
        }


def build_context(kb: KnowledgeBase, entity: str, depth: int | float = 2) -> Context:
    """Link `entity` to every section that mentions it (case-insensitive).

    Only one hop is computed: `depth` is reported back but does not widen the
    search, and `related_entities` stays empty.
    """
    needle = entity.lower()
    rels = [
        Relationship(type="mentioned_in", target=s.name, relevance=MENTION_RELEVANCE)
        for s in kb.iter_sections()
        if needle in s.text.lower()
    ]
    return Context(entity=entity, depth=depth, relationships=rels)
