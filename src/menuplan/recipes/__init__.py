"""Menuplan - Recipe lookup."""

from menuplan.recipes.search import RecipeSearch, build_query, parse_search_results

__all__ = ["RecipeSearch", "build_query", "parse_search_results"]
