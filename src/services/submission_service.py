"""Signup submission flow: validate, simulate the network round trip, then register."""
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from src.models.registrant import Registrant, SignupFields
from src.services.registration_service import RegistrationStore
from src.utils.config import DEFAULT_SUBMIT_DELAY
from src.utils.exceptions import SubmissionError, ValidationError
from src.utils.validation import validate_signup

logger = logging.getLogger(__name__)

FORM_ERROR_MESSAGE = "An error occurred. Please try again."


class SubmissionState(Enum):
    """States of the signup form submission."""
    IDLE = "idle"
    VALIDATING = "validating"
    INVALID = "invalid"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass
class SubmissionResult:
    """Outcome of one submit attempt."""

    outcome: SubmissionState
    errors: Dict[str, str] = field(default_factory=dict)
    registrant: Optional[Registrant] = None
    form_error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is SubmissionState.SUCCESS


def simulated_network(delay: float = DEFAULT_SUBMIT_DELAY) -> Callable[[SignupFields], None]:
    """Build a network step that just waits, standing in for an API call."""
    def _wait(fields: SignupFields) -> None:
        if delay > 0:
            time.sleep(delay)
    return _wait


class SignupFlow:
    """
    Drives one signup form through its submission states.

    Transitions:
        IDLE → VALIDATING → INVALID → IDLE
        IDLE → VALIDATING → SUBMITTING → SUCCESS → IDLE
        IDLE → VALIDATING → FAILURE → IDLE
        IDLE → VALIDATING → SUBMITTING → FAILURE → IDLE

    Nothing in the store changes until the network step has completed;
    add_user is the single mutation.
    """

    def __init__(
        self,
        store: RegistrationStore,
        network: Optional[Callable[[SignupFields], None]] = None,
        income_ranges: Optional[List[str]] = None,
    ):
        self.store = store
        self.network = network if network is not None else simulated_network()
        self.income_ranges = income_ranges
        self.state = SubmissionState.IDLE
        self.history: List[SubmissionState] = [SubmissionState.IDLE]

    def _transition(self, state: SubmissionState) -> None:
        logger.debug(f"Submission {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    def _finish(self, result: SubmissionResult) -> SubmissionResult:
        self._transition(result.outcome)
        self._transition(SubmissionState.IDLE)
        return result

    def submit(self, fields: Union[SignupFields, Mapping[str, Any]]) -> SubmissionResult:
        """
        Submit the signup form.

        Args:
            fields: Raw form values

        Returns:
            SubmissionResult:
            - INVALID with per-field errors if validation fails
            - FAILURE with a form-level message if any step raises
            - SUCCESS with the new registrant otherwise

        Raises:
            SubmissionError: If a submission is already in progress
        """
        if self.state is not SubmissionState.IDLE:
            raise SubmissionError(f"Cannot submit while {self.state.value}")

        if not isinstance(fields, SignupFields):
            fields = SignupFields.from_dict(fields)

        self._transition(SubmissionState.VALIDATING)
        try:
            errors = validate_signup(fields, self.income_ranges)
            if errors:
                return self._finish(SubmissionResult(SubmissionState.INVALID, errors=errors))

            self._transition(SubmissionState.SUBMITTING)
            self.network(fields)
            registrant = self.store.add_user(fields)
        except ValidationError as e:
            return self._finish(SubmissionResult(SubmissionState.INVALID, errors=e.errors))
        except Exception:
            logger.exception(f"Error while {self.state.value} signup form")
            return self._finish(
                SubmissionResult(SubmissionState.FAILURE, form_error=FORM_ERROR_MESSAGE)
            )

        return self._finish(SubmissionResult(SubmissionState.SUCCESS, registrant=registrant))
