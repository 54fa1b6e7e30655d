"""
Menuplan - JSON state store.

Every mutating operation is a read-modify-write of the complete document;
there is no field-level locking and the last writer wins. Writes go to a
temporary file in the same directory and are moved into place, so a crash
never leaves a half-written document behind. A document that no longer
validates is renamed to `<name>.corrupt-<timestamp>` before defaults are
used, so its contents are never overwritten.
"""

import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from menuplan.config import settings
from menuplan.errors import StateStoreError
from menuplan.models import AppState, Person, RecipeCacheItem, RecipeReference, UserProfile

logger = logging.getLogger(__name__)


class StateStore(Protocol):
    def load_state(self) -> AppState: ...

    def save_state(self, state: AppState) -> None: ...


def default_state() -> AppState:
    """Fresh document with an empty profile per person."""
    return AppState(users={person: UserProfile() for person in Person})


class JsonStateStore:
    """AppState persisted as a single JSON file."""

    def __init__(self, path: Path | str | None = None):
        self.path = Path(path) if path is not None else Path(settings.data_file_path)

    def load_state(self) -> AppState:
        if not self.path.exists():
            logger.info(f"No state file at {self.path}; starting from defaults")
            return default_state()

        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise StateStoreError(f"Could not read state: {e}", operation="load_state") from e

        try:
            state = AppState.model_validate_json(raw)
        except ValidationError as e:
            backup = self._set_aside()
            logger.error(
                f"Invalid state file {self.path} ({e.error_count()} errors); "
                f"moved to {backup.name}, starting from defaults"
            )
            return default_state()

        for person in Person:
            state.profile(person)
        return state

    def _set_aside(self) -> Path:
        """Rename an unusable document so the next save cannot overwrite it."""
        backup = self.path.with_name(f"{self.path.name}.corrupt-{datetime.now().strftime('%Y%m%d_%H%M%S_%f')}")
        try:
            os.replace(self.path, backup)
        except OSError as e:
            raise StateStoreError(f"Could not set aside invalid state: {e}", operation="load_state") from e
        return backup

    def save_state(self, state: AppState) -> None:
        payload = state.model_dump_json(indent=2)
        directory = self.path.parent if str(self.path.parent) else Path(".")
        directory.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, self.path)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            logger.error(f"Failed to write state file {self.path}: {e}")
            raise StateStoreError(f"Could not save state: {e}", operation="save_state") from e


class StateRecipeCache:
    """Recipe cache kept inside the state document, keyed by meal name."""

    def __init__(self, store: StateStore):
        self.store = store

    def find(self, name: str) -> RecipeReference | None:
        item = self.store.load_state().recipes.get(name)
        if item is None:
            return None
        return RecipeReference(url=item.url, title=name, image_url=item.image_url)

    def store_reference(self, name: str, reference: RecipeReference) -> None:
        state = self.store.load_state()
        state.recipes[name] = RecipeCacheItem(
            url=reference.url,
            image_url=reference.image_url,
            last_checked=datetime.now().isoformat(),
        )
        self.store.save_state(state)
