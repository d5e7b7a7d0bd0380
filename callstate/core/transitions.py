# callstate/core/transitions.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Transition tables for the call, request and response automata.

Each notification a network client can emit maps to exactly one Transition:
the automaton it moves, the predecessor states it accepts, and the state it
leaves the automaton in. Message transitions are additionally gated on the
call automaton holding a connection.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from callstate.core.errors import ConfigurationError, InvalidTransitionError
from callstate.core.states import (
    RESERVED_MESSAGE_STATES,
    TERMINAL_CALL_STATES,
    Automaton,
    CallState,
    MessageState,
)
from callstate.interfaces.types import ValidationResult

# Notification names in the order a well-behaved client emits them.
NOTIFICATIONS: Tuple[str, ...] = (
    "call_start",
    "dns_start",
    "dns_end",
    "connect_start",
    "secure_connect_start",
    "secure_connect_end",
    "connect_end",
    "connect_failed",
    "connection_acquired",
    "request_headers_start",
    "request_headers_end",
    "request_body_start",
    "request_body_end",
    "response_headers_start",
    "response_headers_end",
    "response_body_start",
    "response_body_end",
    "connection_released",
    "call_end",
    "call_failed",
)


@dataclass(frozen=True)
class Transition:
    """
    Immutable description of what one notification does to one automaton.

    Attributes:
        event: Notification name
        automaton: The automaton this notification advances
        allowed: Predecessor states accepted, in table order
        target: State assigned once the checks pass
        call_gate: Call states required before the message automaton is checked
        resets_messages: Whether both message automata return to READY
    """

    event: str
    automaton: Automaton
    allowed: Tuple[Enum, ...]
    target: Enum
    call_gate: Tuple[CallState, ...] = ()
    resets_messages: bool = False

    def accepts(self, state: Enum) -> bool:
        return state in self.allowed


def _call(event: str, allowed: Iterable[CallState], target: CallState, resets_messages: bool = False) -> Transition:
    return Transition(event, Automaton.CALL, tuple(allowed), target, resets_messages=resets_messages)


CALL_TRANSITIONS: Dict[str, Transition] = {
    t.event: t
    for t in (
        _call("call_start", [CallState.NEW], CallState.STARTED),
        _call(
            "dns_start",
            [CallState.STARTED, CallState.DNS_RESOLVED, CallState.CONNECT_FAILED, CallState.CONNECTION_RELEASED],
            CallState.DNS_RESOLVING,
        ),
        _call("dns_end", [CallState.DNS_RESOLVING], CallState.DNS_RESOLVED),
        # CONNECTED is accepted so a client may try further addresses.
        _call(
            "connect_start",
            [
                CallState.STARTED,
                CallState.DNS_RESOLVED,
                CallState.CONNECT_FAILED,
                CallState.CONNECTION_RELEASED,
                CallState.CONNECTED,
            ],
            CallState.CONNECTING,
        ),
        _call("secure_connect_start", [CallState.CONNECTING], CallState.SECURE_CONNECTING),
        _call("secure_connect_end", [CallState.SECURE_CONNECTING], CallState.SECURE_CONNECTED),
        _call("connect_end", [CallState.CONNECTING, CallState.SECURE_CONNECTED], CallState.CONNECTED),
        _call("connect_failed", [CallState.CONNECTING, CallState.SECURE_CONNECTING], CallState.CONNECT_FAILED),
        _call(
            "connection_acquired",
            [CallState.STARTED, CallState.DNS_RESOLVED, CallState.CONNECTED, CallState.CONNECTION_RELEASED],
            CallState.CONNECTION_HELD,
        ),
        _call("connection_released", [CallState.CONNECTION_HELD], CallState.CONNECTION_RELEASED, resets_messages=True),
        _call("call_end", [CallState.CONNECTION_RELEASED, CallState.STARTED], CallState.ENDED),
        _call(
            "call_failed",
            [
                CallState.STARTED,
                CallState.DNS_RESOLVED,
                CallState.DNS_RESOLVING,
                CallState.CONNECTED,
                CallState.CONNECT_FAILED,
                CallState.CONNECTION_RELEASED,
            ],
            CallState.FAILED,
        ),
    )
}


def _message_table(automaton: Automaton) -> Dict[str, Transition]:
    """Build the four transitions shared by the request and response automata."""
    prefix = automaton.value
    gate = (CallState.CONNECTION_HELD,)
    rows = (
        (
            "headers_start",
            (MessageState.READY, MessageState.HEADERS_TRANSMITTED, MessageState.BODY_TRANSMITTED),
            MessageState.HEADERS_TRANSMITTING,
        ),
        ("headers_end", (MessageState.HEADERS_TRANSMITTING,), MessageState.HEADERS_TRANSMITTED),
        ("body_start", (MessageState.HEADERS_TRANSMITTED,), MessageState.BODY_TRANSMITTING),
        ("body_end", (MessageState.BODY_TRANSMITTING,), MessageState.BODY_TRANSMITTED),
    )
    table = {}
    for suffix, allowed, target in rows:
        event = f"{prefix}_{suffix}"
        table[event] = Transition(event, automaton, allowed, target, call_gate=gate)
    return table


REQUEST_TRANSITIONS: Dict[str, Transition] = _message_table(Automaton.REQUEST)
RESPONSE_TRANSITIONS: Dict[str, Transition] = _message_table(Automaton.RESPONSE)

TRANSITIONS: Dict[str, Transition] = {**CALL_TRANSITIONS, **REQUEST_TRANSITIONS, **RESPONSE_TRANSITIONS}


def require_state(
    actual: Any,
    allowed: Iterable[Any],
    automaton: Optional[Automaton] = None,
    event: Optional[str] = None,
) -> None:
    """
    Fail unless ``actual`` is one of ``allowed``.

    :param actual: Current automaton state.
    :param allowed: States that would be accepted.
    :param automaton: Automaton being checked, for the error message.
    :param event: Notification being checked, for the error message.
    :raises InvalidTransitionError: If ``actual`` is not allowed.
    """
    allowed = tuple(allowed)
    if actual not in allowed:
        raise InvalidTransitionError(actual, allowed, automaton=automaton, event=event)


def check_state(
    actual: Any,
    allowed: Iterable[Any],
    automaton: Optional[Automaton] = None,
    event: Optional[str] = None,
) -> Optional[ValidationResult]:
    """
    Non-raising form of :func:`require_state`.

    :return: None if ``actual`` is allowed, otherwise an ERROR ValidationResult
        whose context holds the actual state, the allowed states, the automaton
        and the event.
    """
    try:
        require_state(actual, allowed, automaton=automaton, event=event)
    except InvalidTransitionError as e:
        return ValidationResult(
            "ERROR",
            e.message,
            {"actual": e.actual, "allowed": e.allowed, "automaton": e.automaton, "event": e.event},
        )
    return None


def validate_tables(transitions: Optional[Mapping[str, Transition]] = None) -> List[str]:
    """
    Check the transition tables for consistency with the state enums.

    Every non-terminal call state must lead somewhere, terminal states must
    lead nowhere, every non-reserved message state must lead somewhere, and
    every notification must have exactly one entry.

    :param transitions: Tables to check; defaults to TRANSITIONS.
    :return: A list of problems, empty when the tables are consistent.
    """
    if transitions is None:
        transitions = TRANSITIONS

    errors: List[str] = []
    call_predecessors = set()
    message_predecessors = {Automaton.REQUEST: set(), Automaton.RESPONSE: set()}

    for name, transition in transitions.items():
        if name != transition.event:
            errors.append(f"Entry {name} describes event {transition.event}")
        state_type = CallState if transition.automaton is Automaton.CALL else MessageState
        for state in transition.allowed + (transition.target,):
            if not isinstance(state, state_type):
                errors.append(f"Event {name} names {state!r}, expected a {state_type.__name__}")
        if transition.automaton is Automaton.CALL:
            call_predecessors.update(transition.allowed)
        else:
            if not transition.call_gate:
                errors.append(f"Message event {name} is not gated on the call automaton")
            call_predecessors.update(transition.call_gate)
            message_predecessors[transition.automaton].update(transition.allowed)

    for state in CallState:
        if state in TERMINAL_CALL_STATES and state in call_predecessors:
            errors.append(f"Terminal state {state.name} has outgoing transitions")
        elif state not in TERMINAL_CALL_STATES and state not in call_predecessors:
            errors.append(f"Call state {state.name} has no outgoing transitions")

    for automaton, predecessors in message_predecessors.items():
        for state in MessageState:
            if state not in RESERVED_MESSAGE_STATES and state not in predecessors:
                errors.append(f"{automaton.value} state {state.name} has no outgoing transitions")

    missing = [name for name in NOTIFICATIONS if name not in transitions]
    extra = [name for name in transitions if name not in NOTIFICATIONS]
    if missing:
        errors.append(f"No transition for notifications: {', '.join(missing)}")
    if extra:
        errors.append(f"Transitions for unknown notifications: {', '.join(extra)}")

    return errors


_problems = validate_tables()
if _problems:
    raise ConfigurationError("Inconsistent transition tables:\n" + "\n".join(_problems))
