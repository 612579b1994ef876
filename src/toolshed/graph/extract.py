from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from typing import Any

from ..kb.store import KnowledgeBase, Section


# Fixed vocabulary: "Bambi", "Trigger", "Session 12", "File 3" (any case).
_VOCAB_RE = re.compile(r"\b(Bambi|Session \d+|Trigger|File \d+)\b", re.IGNORECASE | re.ASCII)
# Two capitalized words: "Sleep Deep", "Good Girl".
_PAIR_RE = re.compile(r"\b([A-Z][a-z]+ [A-Z][a-z]+)\b", re.ASCII)

PATTERNS = (_VOCAB_RE, _PAIR_RE)

MAX_ENTITIES = 50


@dataclass(frozen=True)
class Entity:
    entity: str
    type: str
    source: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ExtractionOutcome:
    section: str
    entities: list[Entity]
    total_extracted: int


def extract_entities(text: str, *, source: str) -> list[Entity]:
    """Return every match of each pattern, one full pass per pattern, in order."""
    out: list[Entity] = []
    for pattern in PATTERNS:
        for m in pattern.finditer(text):
            out.append(Entity(entity=m.group(0), type="extracted", source=source))
    return out


def dedupe(entities: list[Entity]) -> list[Entity]:
    # Keyed by entity text: the first sighting fixes the position, the last one wins the value.
    by_text: dict[str, Entity] = {}
    for e in entities:
        by_text[e.entity] = e
    return list(by_text.values())


def extract(kb: KnowledgeBase, section: str, *, limit: int = MAX_ENTITIES) -> ExtractionOutcome:
    if section == "all":
        sections: list[Section] = list(kb.iter_sections())
    else:
        one = kb.section(section)
        sections = [one] if one is not None else []

    found: list[Entity] = []
    for s in sections:
        found.extend(extract_entities(s.text, source=s.name))

    uniq = dedupe(found)
    return ExtractionOutcome(section=section, entities=uniq[:limit], total_extracted=len(uniq))
