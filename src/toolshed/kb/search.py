from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from .store import KnowledgeBase, Section


KEYWORD_RELEVANCE = 0.9
EXCERPT_CONTEXT_CHARS = 100


@dataclass(frozen=True)
class SearchHit:
    section: str
    relevance: float
    excerpt: str
    full_length: Any

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SearchOutcome:
    results: list[SearchHit]
    total_found: int


def search(kb: KnowledgeBase, query: str, *, section: str = "all", max_results: int = 5) -> SearchOutcome:
    """Case-insensitive keyword search over knowledge-base sections.

    Each matching section yields exactly one hit, built around the first
    occurrence of the query. Hits keep section order; `total_found` counts
    all of them before truncation to `max_results`.
    """
    if section == "all":
        sections = list(kb.iter_sections())
    else:
        one = kb.section(section)
        sections = [one] if one is not None else []

    hits = [h for h in (_search_section(s, query) for s in sections) if h is not None]
    return SearchOutcome(results=hits[: max(0, int(max_results))], total_found=len(hits))


def _search_section(section: Section, query: str) -> SearchHit | None:
    text = section.text
    if not text:
        return None

    idx = text.lower().find(query.lower())
    if idx < 0:
        return None

    return SearchHit(
        section=section.name,
        relevance=KEYWORD_RELEVANCE,
        excerpt=f"...{excerpt_window(text, idx, len(query))}...",
        full_length=section.full_length or len(text),
    )


def excerpt_window(text: str, index: int, match_len: int, *, context: int = EXCERPT_CONTEXT_CHARS) -> str:
    start = max(0, index - context)
    end = min(len(text), index + match_len + context)
    return text[start:end]
