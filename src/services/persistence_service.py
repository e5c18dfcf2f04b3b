"""Serialize registration store state to a durable key-value slot and back."""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from src.models.registrant import Registrant
from src.services.storage_service import JsonFileStorage
from src.utils.config import DEFAULT_BASELINE_COUNT, DEFAULT_STORAGE_KEY
from src.utils.exceptions import PersistenceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreState:
    """Everything the registration store persists."""

    registrants: Tuple[Registrant, ...] = field(default_factory=tuple)
    signup_count: int = DEFAULT_BASELINE_COUNT
    active_registrant: Optional[Registrant] = None


def serialize_state(state: StoreState) -> Dict[str, Any]:
    """
    Convert store state to its JSON document.

    Returns:
        dict with exactly "registrants", "signupCount" and "activeRegistrant"
    """
    active = state.active_registrant
    return {
        "registrants": [registrant.to_dict() for registrant in state.registrants],
        "signupCount": state.signup_count,
        "activeRegistrant": active.to_dict() if active is not None else None,
    }


def deserialize_state(document: Dict[str, Any], baseline: int = DEFAULT_BASELINE_COUNT) -> StoreState:
    """
    Rebuild store state from its JSON document.

    Args:
        document: Parsed JSON document
        baseline: signupCount to use when the document has none

    Returns:
        StoreState

    Behavior:
        - Missing fields fall back to defaults
        - Unknown top-level and registrant fields are ignored
        - Registrant entries that cannot be rebuilt are skipped with a
          warning; signupCount and the remaining registrants are kept

    Raises:
        PersistenceError: If the document or its top-level fields have the
        wrong shape
    """
    if not isinstance(document, dict):
        raise PersistenceError("Stored state must be a JSON object")

    raw_registrants = document.get("registrants")
    if raw_registrants is None:
        raw_registrants = []
    if not isinstance(raw_registrants, list):
        raise PersistenceError("'registrants' must be a list")

    signup_count = document.get("signupCount", baseline)
    if signup_count is None:
        signup_count = baseline
    if isinstance(signup_count, bool) or not isinstance(signup_count, int) or signup_count < 0:
        raise PersistenceError(f"'signupCount' must be a non-negative integer, got: {signup_count!r}")

    registrants = []
    for position, item in enumerate(raw_registrants):
        try:
            registrants.append(Registrant.from_dict(item))
        except ValueError as e:
            logger.warning(f"Skipping stored registrant #{position}: {e}")

    raw_active = document.get("activeRegistrant")
    active = None
    if raw_active is not None:
        try:
            active = Registrant.from_dict(raw_active)
        except ValueError as e:
            logger.warning(f"Dropping stored active registrant: {e}")

    return StoreState(
        registrants=tuple(registrants),
        signup_count=signup_count,
        active_registrant=active,
    )


class PersistenceAdapter:
    """Reads store state at start-up and writes it after every mutation."""

    CORRUPT_LABEL = "corrupt"

    def __init__(self, storage: JsonFileStorage, key: str = DEFAULT_STORAGE_KEY,
                 baseline: int = DEFAULT_BASELINE_COUNT):
        self.storage = storage
        self.key = key
        self.baseline = baseline

    def load(self) -> StoreState:
        """
        Restore state from storage.

        Returns:
            StoreState: Stored state, or fresh defaults if nothing was saved

        Raises:
            PersistenceError: If the slot cannot be read or parsed. The
            unreadable document is first copied to "<key>.corrupt" so the
            next write cannot destroy it.
        """
        try:
            document = self.storage.get_item(self.key)
        except (OSError, ValueError) as e:
            self._preserve_unreadable()
            raise PersistenceError(f"Failed to read stored state '{self.key}': {e}") from e

        if document is None:
            logger.info(f"No stored state under '{self.key}', starting at {self.baseline}")
            return StoreState(signup_count=self.baseline)

        try:
            state = deserialize_state(document, baseline=self.baseline)
        except PersistenceError:
            self._preserve_unreadable()
            raise

        logger.info(
            f"Restored {len(state.registrants)} registrants, "
            f"signup count {state.signup_count}"
        )
        return state

    def save(self, state: StoreState) -> None:
        """
        Write state to storage.

        Raises:
            PersistenceError: If the write fails
        """
        try:
            self.storage.set_item(self.key, serialize_state(state))
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Failed to write stored state '{self.key}': {e}") from e

    def _preserve_unreadable(self) -> None:
        try:
            copy_path = self.storage.preserve_item(self.key, self.CORRUPT_LABEL)
        except (OSError, ValueError) as e:
            logger.error(f"Could not preserve unreadable state '{self.key}': {e}")
            return
        if copy_path:
            logger.warning(f"Kept unreadable state '{self.key}' at {copy_path}")
