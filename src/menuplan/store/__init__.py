"""
Menuplan - State storage.

The whole application state is one JSON document, read and written
wholesale.
"""

from menuplan.store.json_store import JsonStateStore, StateRecipeCache, StateStore, default_state

__all__ = ["JsonStateStore", "StateRecipeCache", "StateStore", "default_state"]
