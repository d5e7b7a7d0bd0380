# callstate/tests/unit/test_errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""Test suite for error classes defined in errors.py."""

import copy
import pickle

import pytest

from callstate.core.errors import (
    CallStateError,
    ConfigurationError,
    ErrorContext,
    HookError,
    InvalidTransitionError,
    create_error_context,
)
from callstate.core.states import Automaton, CallState, MessageState

# -----------------------------------------------------------------------------
# BASE ERROR TESTS
# -----------------------------------------------------------------------------


def test_error_hierarchy():
    assert issubclass(InvalidTransitionError, CallStateError)
    assert issubclass(HookError, CallStateError)
    assert issubclass(ConfigurationError, CallStateError)


def test_call_state_error_basic():
    error = CallStateError("test message")
    assert str(error) == "test message"
    assert error.message == "test message"
    assert error.details == {}

    error = CallStateError("test message", {"key": "value"})
    assert error.details == {"key": "value"}


def test_call_state_error_none_details():
    assert CallStateError("message", None).details == {}


# -----------------------------------------------------------------------------
# INVALID TRANSITION ERROR TESTS
# -----------------------------------------------------------------------------


def test_invalid_transition_error_attributes():
    error = InvalidTransitionError(
        CallState.STARTED, [CallState.CONNECTION_HELD], Automaton.CALL, "request_headers_start"
    )
    assert error.actual is CallState.STARTED
    assert error.allowed == (CallState.CONNECTION_HELD,)
    assert error.automaton is Automaton.CALL
    assert error.event == "request_headers_start"


def test_invalid_transition_error_message():
    error = InvalidTransitionError(
        MessageState.BODY_TRANSMITTING,
        (MessageState.HEADERS_TRANSMITTED,),
        Automaton.RESPONSE,
        "response_body_start",
    )
    assert str(error) == (
        "expected BODY_TRANSMITTING to be in [HEADERS_TRANSMITTED] "
        "(response automaton, event response_body_start)"
    )


def test_invalid_transition_error_preserves_allowed_order():
    allowed = [CallState.CONNECTION_RELEASED, CallState.STARTED]
    error = InvalidTransitionError(CallState.NEW, allowed)
    assert str(error) == "expected NEW to be in [CONNECTION_RELEASED, STARTED]"


def test_invalid_transition_error_with_plain_values():
    error = InvalidTransitionError("c", ["a", "b"])
    assert error.message == "expected c to be in [a, b]"
    assert error.automaton is None
    assert error.event is None


# -----------------------------------------------------------------------------
# CONFIGURATION ERROR TESTS
# -----------------------------------------------------------------------------


def test_configuration_error():
    error = ConfigurationError("bad value", "fail_fast", "yes", {"detail": "value"})
    assert error.field_name == "fail_fast"
    assert error.value == "yes"
    assert error.details == {"detail": "value"}


# -----------------------------------------------------------------------------
# ERROR CONTEXT TESTS
# -----------------------------------------------------------------------------


def test_error_context():
    error = HookError("test error", {"detail": "value"})
    context = create_error_context(error, "test traceback")

    assert context.error_type is HookError
    assert context.message == "test error"
    assert isinstance(context.timestamp, float)
    assert context.traceback == "test traceback"
    assert context.details == {"detail": "value"}


def test_error_context_immutability():
    context = create_error_context(CallStateError("test error"), "test traceback")

    with pytest.raises(Exception):  # dataclass is frozen
        context.traceback = "new traceback"
    assert isinstance(context, ErrorContext)


def test_error_context_copies_details():
    error = CallStateError("test error", {"a": 1})
    context = create_error_context(error, "")
    error.details["b"] = 2
    assert context.details == {"a": 1}


# -----------------------------------------------------------------------------
# PICKLING AND COPYING
# -----------------------------------------------------------------------------


@pytest.mark.parametrize("clone", [lambda e: pickle.loads(pickle.dumps(e)), copy.copy, copy.deepcopy])
def test_invalid_transition_error_survives_pickle_and_copy(clone):
    error = InvalidTransitionError(
        CallState.NEW, [CallState.STARTED], Automaton.CALL, "call_end", {"call": "GET /"}
    )
    restored = clone(error)

    assert type(restored) is InvalidTransitionError
    assert restored.actual is CallState.NEW
    assert restored.allowed == (CallState.STARTED,)
    assert restored.automaton is Automaton.CALL
    assert restored.event == "call_end"
    assert restored.message == error.message
    assert str(restored) == str(error)
    assert restored.details == {"call": "GET /"}


def test_recorded_violations_can_be_deep_copied(recording_listener):
    recording_listener.call_end(None)
    violations = copy.deepcopy(recording_listener.violations)
    assert [v.event for v in violations] == ["call_end"]
    assert violations[0].actual is CallState.NEW


@pytest.mark.parametrize(
    "error",
    [
        CallStateError("base", {"a": 1}),
        HookError("hook", {"b": 2}),
        ConfigurationError("config", "fail_fast", "yes", {"c": 3}),
    ],
)
def test_other_errors_survive_pickle(error):
    restored = pickle.loads(pickle.dumps(error))
    assert type(restored) is type(error)
    assert restored.message == error.message
    assert restored.details == error.details
    assert getattr(restored, "field_name", None) == getattr(error, "field_name", None)
    assert getattr(restored, "value", None) == getattr(error, "value", None)
