"""Registration store holding waitlist signups, the signup counter and the active registrant."""
import logging
from threading import Lock
from typing import Any, Callable, List, Mapping, Optional, Tuple, Union

from src.models.registrant import Registrant, SignupFields
from src.services.persistence_service import PersistenceAdapter, StoreState
from src.utils.config import DEFAULT_BASELINE_COUNT, DEFAULT_REFERRAL_BASE_URL
from src.utils.date_utils import to_iso_timestamp
from src.utils.exceptions import PersistenceError, ValidationError
from src.utils.referral import build_referral_url, generate_referral_code
from src.utils.validation import validate_signup

logger = logging.getLogger(__name__)

PersistenceErrorHandler = Callable[[PersistenceError], None]


class RegistrationStore:
    """
    The single in-memory source of truth for waitlist signups.

    State:
        - registrants: append-only, in signup order
        - signup_count: baseline plus one per add_user, never recomputed
          from registrants and never reset
        - active_registrant: most recent add_user result, held as an index
          into registrants

    Every mutation runs under one lock and is followed by a write through
    the persistence adapter. Persistence failures are logged and reported
    but never undo the in-memory change.
    """

    def __init__(
        self,
        adapter: Optional[PersistenceAdapter] = None,
        state: Optional[StoreState] = None,
        baseline: int = DEFAULT_BASELINE_COUNT,
        referral_base_url: str = DEFAULT_REFERRAL_BASE_URL,
        income_ranges: Optional[List[str]] = None,
        clock: Callable[[], str] = to_iso_timestamp,
        code_generator: Callable[[str], str] = generate_referral_code,
        on_persistence_error: Optional[PersistenceErrorHandler] = None,
    ):
        if state is None:
            state = StoreState(signup_count=baseline)

        self._adapter = adapter
        self._referral_base_url = referral_base_url
        self._income_ranges = income_ranges
        self._clock = clock
        self._code_generator = code_generator
        self._on_persistence_error = on_persistence_error
        self._lock = Lock()

        self._registrants: List[Registrant] = list(state.registrants)
        self._signup_count = state.signup_count
        self._active_index = self._locate_active(state.active_registrant)

        self.last_persistence_error: Optional[PersistenceError] = None

    @classmethod
    def load(cls, adapter: PersistenceAdapter, **kwargs: Any) -> "RegistrationStore":
        """
        Create the store from persisted state.

        Falls back to fresh defaults if the stored state cannot be read; the
        read failure is logged and kept in last_persistence_error.
        """
        load_error = None
        try:
            state = adapter.load()
        except PersistenceError as e:
            logger.error(f"Could not restore registration state, starting fresh: {e}")
            state = StoreState(signup_count=adapter.baseline)
            load_error = e

        kwargs.setdefault("baseline", adapter.baseline)
        store = cls(adapter=adapter, state=state, **kwargs)
        store.last_persistence_error = load_error
        return store

    def _locate_active(self, active: Optional[Registrant]) -> Optional[int]:
        """Find the index of the active registrant, most recent match first."""
        if active is None:
            return None
        for index in range(len(self._registrants) - 1, -1, -1):
            if self._registrants[index] == active:
                return index
        logger.warning(
            f"Active registrant {active.referral_code} is not among stored registrants; clearing it"
        )
        return None

    @property
    def registrants(self) -> Tuple[Registrant, ...]:
        """Snapshot of registrants in signup order."""
        return tuple(self._registrants)

    @property
    def signup_count(self) -> int:
        return self._signup_count

    @property
    def active_registrant(self) -> Optional[Registrant]:
        """The most recently added registrant, or None."""
        if self._active_index is None:
            return None
        return self._registrants[self._active_index]

    def snapshot(self) -> StoreState:
        """Return an immutable copy of the current state."""
        return StoreState(
            registrants=self.registrants,
            signup_count=self._signup_count,
            active_registrant=self.active_registrant,
        )

    def add_user(self, fields: Union[SignupFields, Mapping[str, Any]]) -> Registrant:
        """
        Register a new waitlist signup.

        Args:
            fields: Validated signup fields

        Returns:
            Registrant: The newly created record

        Raises:
            ValidationError: If fields fail validation (nothing is mutated)

        Behavior:
            - Generates a referral code from the email
            - Stamps date_joined with the current time
            - Appends, increments signup_count and sets the active
              registrant in one step
            - Never deduplicates: each call adds exactly one registrant
            - Persists afterwards; persistence failures do not fail the call
        """
        if not isinstance(fields, SignupFields):
            fields = SignupFields.from_dict(fields)

        errors = validate_signup(fields, self._income_ranges)
        if errors:
            raise ValidationError(errors)

        registrant = Registrant.from_fields(
            fields,
            referral_code=self._code_generator(fields.email),
            date_joined=self._clock(),
        )

        with self._lock:
            self._registrants.append(registrant)
            self._signup_count += 1
            self._active_index = len(self._registrants) - 1
            state = self.snapshot()
            error = self._persist(state)

        self._report(error)
        logger.info(
            f"Registered {registrant.referral_code}, signup count now {state.signup_count}"
        )
        return registrant

    def get_by_referral_code(self, code: str) -> Optional[Registrant]:
        """
        Find a registrant by referral code.

        Returns:
            Registrant: First registrant with that code, or None if not found
        """
        for registrant in self.registrants:
            if registrant.referral_code == code:
                return registrant
        return None

    def reset(self) -> None:
        """
        Clear registrants and the active registrant.

        signup_count is left unchanged: it counts historical signups, not
        the registrants kept in this session.
        """
        with self._lock:
            cleared = len(self._registrants)
            self._registrants = []
            self._active_index = None
            error = self._persist(self.snapshot())

        self._report(error)
        logger.info(f"Reset registration store, cleared {cleared} registrants")

    def referral_url(self) -> Optional[str]:
        """Return the invite link of the active registrant, or None."""
        active = self.active_registrant
        if active is None:
            return None
        return self.referral_url_for(active)

    def referral_url_for(self, registrant: Registrant) -> str:
        """Return the invite link of a given registrant."""
        return build_referral_url(registrant.referral_code, self._referral_base_url)

    def _persist(self, state: StoreState) -> Optional[PersistenceError]:
        """Write state through the adapter, returning the failure instead of raising it."""
        if self._adapter is None:
            return None

        try:
            self._adapter.save(state)
        except PersistenceError as e:
            logger.error(f"Failed to persist registration state: {e}")
            self.last_persistence_error = e
            return e

        self.last_persistence_error = None
        return None

    def _report(self, error: Optional[PersistenceError]) -> None:
        # Runs outside the lock so handlers may read the store
        if error is not None and self._on_persistence_error is not None:
            self._on_persistence_error(error)
