from patternhub.db.models import Architecture, Base, Favorite, GeneratedSnippet, Pattern
from patternhub.db.storage import DatabaseStorage

__all__ = [
    "Architecture",
    "Base",
    "DatabaseStorage",
    "Favorite",
    "GeneratedSnippet",
    "Pattern",
]
