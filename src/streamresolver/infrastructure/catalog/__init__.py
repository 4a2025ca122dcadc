from .justwatch import JustWatchCatalogMatcher
from .matching import extract_all_offers, extract_free_offers, select_best_match

__all__ = [
    "JustWatchCatalogMatcher",
    "extract_all_offers",
    "extract_free_offers",
    "select_best_match",
]
