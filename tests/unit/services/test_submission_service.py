"""Unit tests for the signup submission flow."""
from unittest.mock import MagicMock, patch

import pytest

from src.models.registrant import SignupFields
from src.services.registration_service import RegistrationStore
from src.services.submission_service import (
    FORM_ERROR_MESSAGE,
    SignupFlow,
    SubmissionState,
    simulated_network,
)
from src.utils.exceptions import SubmissionError

INCOME_RANGES = ["0-50000", "50000-100000", "100000-250000"]

S = SubmissionState


@pytest.fixture
def store():
    return RegistrationStore(income_ranges=INCOME_RANGES)


@pytest.fixture
def fields():
    return SignupFields(
        full_name="Ada Lovelace",
        email="ada@example.com",
        phone_number="08012345678",
        income_range="50000-100000",
    )


def _flow(store, network=None):
    return SignupFlow(store, network=network or (lambda f: None), income_ranges=INCOME_RANGES)


class TestSuccessfulSubmission:
    """Tests for the happy path."""

    def test_success_result(self, store, fields):
        result = _flow(store).submit(fields)

        assert result.succeeded
        assert result.outcome is S.SUCCESS
        assert result.errors == {}
        assert result.form_error is None
        assert result.registrant == store.active_registrant

    def test_state_history(self, store, fields):
        flow = _flow(store)
        flow.submit(fields)

        assert flow.history == [S.IDLE, S.VALIDATING, S.SUBMITTING, S.SUCCESS, S.IDLE]
        assert flow.state is S.IDLE

    def test_store_mutated_once(self, store, fields):
        _flow(store).submit(fields)

        assert len(store.registrants) == 1
        assert store.signup_count == 137583

    def test_network_called_before_registration(self, store, fields):
        seen_counts = []
        _flow(store, network=lambda f: seen_counts.append(store.signup_count)).submit(fields)

        assert seen_counts == [137582]
        assert store.signup_count == 137583

    def test_flow_is_reusable(self, store, fields):
        flow = _flow(store)
        flow.submit(fields)
        flow.submit(fields)

        assert store.signup_count == 137584
        assert flow.history.count(S.SUCCESS) == 2


class TestInvalidSubmission:
    """Tests for validation failures."""

    def test_empty_email_scenario(self, store, fields):
        network = MagicMock()
        flow = _flow(store, network=network)

        result = flow.submit(SignupFields(
            full_name=fields.full_name,
            email="",
            phone_number=fields.phone_number,
            income_range=fields.income_range,
        ))

        assert result.outcome is S.INVALID
        assert result.errors == {"email": "required"}
        assert store.registrants == ()
        assert store.signup_count == 137582
        assert store.active_registrant is None
        network.assert_not_called()

    def test_state_history(self, store):
        flow = _flow(store)
        flow.submit(SignupFields())

        assert flow.history == [S.IDLE, S.VALIDATING, S.INVALID, S.IDLE]

    def test_accepts_camel_case_mapping(self, store):
        result = _flow(store).submit({"fullName": "Ada", "email": "a@b"})

        assert result.errors == {
            "email": "invalid format",
            "phone_number": "required",
            "income_range": "required",
        }


class TestFailedSubmission:
    """Tests for network failures."""

    def test_network_failure_reports_form_error(self, store, fields):
        def broken_network(f):
            raise SubmissionError("timeout")

        flow = _flow(store, network=broken_network)
        result = flow.submit(fields)

        assert result.outcome is S.FAILURE
        assert result.form_error == FORM_ERROR_MESSAGE
        assert result.registrant is None
        assert flow.history == [S.IDLE, S.VALIDATING, S.SUBMITTING, S.FAILURE, S.IDLE]

    def test_network_failure_leaves_store_untouched(self, store, fields):
        def broken_network(f):
            raise ConnectionError("offline")

        _flow(store, network=broken_network).submit(fields)

        assert store.registrants == ()
        assert store.signup_count == 137582
        assert store.active_registrant is None

    def test_store_failure_reports_form_error(self, fields):
        store = MagicMock()
        store.add_user.side_effect = RuntimeError("boom")

        result = _flow(store).submit(fields)

        assert result.outcome is S.FAILURE
        assert result.form_error == FORM_ERROR_MESSAGE

    def test_validation_crash_ends_in_failure_then_idle(self, store, fields):
        flow = _flow(store)

        with patch(
            "src.services.submission_service.validate_signup",
            side_effect=FileNotFoundError("income_ranges.json"),
        ):
            result = flow.submit(fields)

        assert result.outcome is S.FAILURE
        assert result.form_error == FORM_ERROR_MESSAGE
        assert flow.history == [S.IDLE, S.VALIDATING, S.FAILURE, S.IDLE]
        assert store.registrants == ()

        assert flow.submit(fields).outcome is S.SUCCESS

    def test_submit_while_busy_raises(self, store, fields):
        flow = _flow(store)
        flow.state = S.SUBMITTING

        with pytest.raises(SubmissionError, match="Cannot submit while submitting"):
            flow.submit(fields)


class TestSimulatedNetwork:
    """Tests for the default network step."""

    def test_sleeps_for_delay(self, fields):
        with patch("src.services.submission_service.time.sleep") as sleep:
            simulated_network(1.0)(fields)
        sleep.assert_called_once_with(1.0)

    def test_zero_delay_does_not_sleep(self, fields):
        with patch("src.services.submission_service.time.sleep") as sleep:
            simulated_network(0)(fields)
        sleep.assert_not_called()
