# callstate/core/states.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from enum import Enum, auto
from typing import FrozenSet


class CallState(Enum):
    """Coarse phase of one network call.

    Exactly one value holds per call at any instant.
    """

    NEW = auto()  # Listener created, call not started
    STARTED = auto()
    DNS_RESOLVING = auto()
    DNS_RESOLVED = auto()
    CONNECTING = auto()
    SECURE_CONNECTING = auto()
    SECURE_CONNECTED = auto()
    CONNECTED = auto()
    CONNECT_FAILED = auto()
    CONNECTION_HELD = auto()  # Request/response transfer allowed
    CONNECTION_RELEASED = auto()
    ENDED = auto()  # Terminal
    FAILED = auto()  # Terminal


class MessageState(Enum):
    """Transmission progress of one request or response message."""

    READY = auto()
    HEADERS_TRANSMITTING = auto()
    HEADERS_TRANSMITTED = auto()
    BODY_TRANSMITTING = auto()
    BODY_TRANSMITTED = auto()
    DONE = auto()  # Reserved, never assigned


class Automaton(Enum):
    """Identifies one of the three automata held by a listener."""

    CALL = "call"
    REQUEST = "request"
    RESPONSE = "response"


TERMINAL_CALL_STATES: FrozenSet[CallState] = frozenset({CallState.ENDED, CallState.FAILED})

RESERVED_MESSAGE_STATES: FrozenSet[MessageState] = frozenset({MessageState.DONE})
