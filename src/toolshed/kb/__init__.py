from .search import SearchHit, SearchOutcome, search
from .store import KnowledgeBase, KnowledgeStore, Section

__all__ = ["KnowledgeBase", "KnowledgeStore", "SearchHit", "SearchOutcome", "Section", "search"]
