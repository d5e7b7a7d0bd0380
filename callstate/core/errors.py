# callstate/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""Error hierarchy for call lifecycle validation."""

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional, Tuple, Type

if TYPE_CHECKING:
    from callstate.core.states import Automaton


class CallStateError(Exception):
    """
    Base exception class for errors raised by the call lifecycle validator.

    Every error carries a human-readable message and an optional details
    dictionary with structured context.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __reduce__(self):
        return (type(self), (self.message, self.details))


class InvalidTransitionError(CallStateError):
    """
    Raised when a notification arrives while an automaton is outside the set
    of states that notification may follow.

    This is a fatal ordering bug in the event source. It is raised from inside
    the offending notification and never handled by the validator itself.

    Attributes:
        automaton: Which automaton rejected the notification
        actual: The state the automaton was in
        allowed: The states that would have been accepted, in table order
        event: Name of the rejected notification, if known
    """

    def __init__(
        self,
        actual: Any,
        allowed: Iterable[Any],
        automaton: Optional["Automaton"] = None,
        event: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.actual = actual
        self.allowed: Tuple[Any, ...] = tuple(allowed)
        self.automaton = automaton
        self.event = event
        super().__init__(self._format(), details)

    def __reduce__(self):
        return (type(self), (self.actual, self.allowed, self.automaton, self.event, self.details))

    def _format(self) -> str:
        names = ", ".join(_state_name(state) for state in self.allowed)
        message = f"expected {_state_name(self.actual)} to be in [{names}]"
        where = []
        if self.automaton is not None:
            where.append(f"{self.automaton.value} automaton")
        if self.event is not None:
            where.append(f"event {self.event}")
        if where:
            message += f" ({', '.join(where)})"
        return message


class HookError(CallStateError):
    """
    Raised when a hook cannot be registered with a HookManager.
    """


class ConfigurationError(CallStateError):
    """
    Raised when listener configuration values are invalid.

    Attributes:
        field_name: The offending configuration field
        value: The rejected value
    """

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        value: Any = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details)
        self.field_name = field_name
        self.value = value

    def __reduce__(self):
        return (type(self), (self.message, self.field_name, self.value, self.details))


@dataclass(frozen=True)
class ErrorContext:
    """
    Immutable snapshot of an error for reporting by test harnesses.
    """

    error_type: Type[CallStateError]
    message: str
    timestamp: float
    traceback: str
    details: Dict[str, Any] = field(default_factory=dict)


def create_error_context(error: CallStateError, traceback: str) -> ErrorContext:
    """
    Build an ErrorContext from an error and its formatted traceback.

    :param error: The error to capture.
    :param traceback: Formatted traceback text.
    :return: A frozen ErrorContext.
    """
    return ErrorContext(
        error_type=type(error),
        message=error.message,
        timestamp=time.time(),
        traceback=traceback,
        details=dict(error.details),
    )


def _state_name(state: Any) -> str:
    return getattr(state, "name", str(state))
