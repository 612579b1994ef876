"""Entity extraction and mention-based context over the knowledge base.

There is no stored graph: "relationships" are computed per request by
scanning section text for the entity.
"""
