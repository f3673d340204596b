"""
Favorites - per-session favorite patterns reconciled against a provider
"""

from patternhub.favorites.provider import (
    DatabaseFavoritesProvider,
    FavoritesProvider,
    HttpFavoritesProvider,
)
from patternhub.favorites.reconciler import FavoritesReconciler

__all__ = [
    "DatabaseFavoritesProvider",
    "FavoritesProvider",
    "FavoritesReconciler",
    "HttpFavoritesProvider",
]
