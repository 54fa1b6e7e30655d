"""
Menuplan - Meal catalog.

Static configuration, loaded once and never mutated.
"""

from menuplan.catalog.catalog import Catalog, CatalogIncompleteError, load_catalog
from menuplan.catalog.seasons import current_season, seasonal_fruit, seasonal_veg

__all__ = [
    "Catalog",
    "CatalogIncompleteError",
    "current_season",
    "load_catalog",
    "seasonal_fruit",
    "seasonal_veg",
]
