# callstate/tests/utils.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from typing import Any, Dict, List, Optional

from hypothesis import strategies as st

from callstate.core.listener import StateMachineEventListener
from callstate.core.states import CallState, MessageState

# Notifications of one plain HTTP exchange over a fresh connection.
SUCCESSFUL_CALL = [
    "call_start",
    "connect_start",
    "connect_end",
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
]


class RecordingHook:
    """Hook that records every call it receives."""

    def __init__(self) -> None:
        self.calls: Dict[str, List[Any]] = {"pre_transition": [], "post_transition": [], "on_violation": []}

    def pre_transition(self, transition) -> None:
        self.calls["pre_transition"].append(transition)

    def post_transition(self, transition) -> None:
        self.calls["post_transition"].append(transition)

    def on_violation(self, error) -> None:
        self.calls["on_violation"].append(error)


def force_state(
    listener: StateMachineEventListener,
    call_state: CallState,
    request_state: Optional[MessageState] = None,
    response_state: Optional[MessageState] = None,
) -> StateMachineEventListener:
    """Put a listener's automata directly into the given states."""
    listener._call_state = call_state
    if request_state is not None:
        listener._request_state = request_state
    if response_state is not None:
        listener._response_state = response_state
    return listener


# -----------------------------------------------------------------------------
# HYPOTHESIS STRATEGIES
# -----------------------------------------------------------------------------


@st.composite
def connect_phase(draw) -> List[str]:
    """Zero or more failed attempts followed by one successful connect."""
    events: List[str] = []
    failures = draw(st.integers(min_value=0, max_value=2))
    for attempt in range(failures + 1):
        if draw(st.booleans()):
            events += ["dns_start", "dns_end"]
        events.append("connect_start")
        secure = draw(st.booleans())
        if secure:
            events.append("secure_connect_start")
        if attempt < failures:
            events.append("connect_failed")
            continue
        if secure:
            events.append("secure_connect_end")
        events.append("connect_end")
    return events


@st.composite
def message_exchange(draw, prefix: str) -> List[str]:
    """One or more header/body rounds of a request or response."""
    events: List[str] = []
    for _ in range(draw(st.integers(min_value=1, max_value=2))):
        events += [f"{prefix}_headers_start", f"{prefix}_headers_end"]
        if draw(st.booleans()):
            events += [f"{prefix}_body_start", f"{prefix}_body_end"]
    return events


@st.composite
def held_connection(draw) -> List[str]:
    """Acquire a connection, optionally connecting first, and exchange messages on it."""
    events: List[str] = []
    if draw(st.booleans()):
        events += draw(connect_phase())
    events.append("connection_acquired")
    if draw(st.booleans()):
        events += draw(message_exchange("request"))
        events += draw(message_exchange("response"))
    return events


@st.composite
def valid_calls(draw) -> List[str]:
    """Complete notification sequences a conforming client may emit."""
    events = ["call_start"]
    for _ in range(draw(st.integers(min_value=0, max_value=3))):
        events += draw(held_connection())
        events.append("connection_released")
    events.append(draw(st.sampled_from(["call_end", "call_failed"])))
    return events
