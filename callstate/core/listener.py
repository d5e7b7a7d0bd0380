# callstate/core/listener.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Event listener that enforces valid lifecycle ordering for a single call.

For example, it is invalid to receive any notification after ``call_end``,
to start a response body before its headers finished, or to acquire a
connection twice without releasing it in between.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from callstate.core.config import ListenerConfig
from callstate.core.errors import InvalidTransitionError
from callstate.core.hooks import HookManager
from callstate.core.states import Automaton, CallState, MessageState
from callstate.core.transitions import (
    CALL_TRANSITIONS,
    REQUEST_TRANSITIONS,
    RESPONSE_TRANSITIONS,
    Transition,
    require_state,
)
from callstate.interfaces.abc import AbstractHook, EventListener
from callstate.interfaces.types import (
    Call,
    Connection,
    Handshake,
    InetAddress,
    InetSocketAddress,
    IOFailure,
    NegotiatedProtocol,
    Proxy,
    Request,
    Response,
)


@dataclass(frozen=True)
class ListenerSnapshot:
    """Point-in-time copy of the three automata."""

    call_state: CallState
    request_state: MessageState
    response_state: MessageState


class StateMachineEventListener(EventListener):
    """
    An EventListener that validates every notification against the call,
    request and response automata.

    A notification arriving while its automaton is outside the accepted
    predecessor states raises InvalidTransitionError from inside that
    notification. Request and response notifications are only accepted while
    the call holds a connection; releasing the connection resets both message
    automata so the same listener can follow a request over a reacquired
    connection.

    Not thread-safe: the client must serialize notifications for one call.
    """

    def __init__(
        self,
        config: Optional[ListenerConfig] = None,
        hooks: Optional[List[AbstractHook]] = None,
    ) -> None:
        """
        :param config: Listener settings; defaults to ListenerConfig().
        :param hooks: Optional hooks observing transitions and violations.
        """
        self._config = config or ListenerConfig.default()
        self._hooks = HookManager(hooks)
        self._logger = logging.getLogger(self._config.logger_name)
        self._call_state = CallState.NEW
        self._request_state = MessageState.READY
        self._response_state = MessageState.READY
        self._violations: List[InvalidTransitionError] = []

    @property
    def call_state(self) -> CallState:
        return self._call_state

    @property
    def request_state(self) -> MessageState:
        return self._request_state

    @property
    def response_state(self) -> MessageState:
        return self._response_state

    @property
    def config(self) -> ListenerConfig:
        return self._config

    @property
    def hook_manager(self) -> HookManager:
        return self._hooks

    @property
    def violations(self) -> List[InvalidTransitionError]:
        """Violations recorded while fail_fast is off, oldest first."""
        return list(self._violations)

    def snapshot(self) -> ListenerSnapshot:
        return ListenerSnapshot(self._call_state, self._request_state, self._response_state)

    def assert_no_violations(self) -> None:
        """
        Raise the first recorded violation, if any.

        :raises InvalidTransitionError: If any notification was rejected.
        """
        if self._violations:
            raise self._violations[0]

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(call={self._call_state.name}, "
            f"request={self._request_state.name}, response={self._response_state.name})"
        )

    # -------------------------------------------------------------------------
    # Call lifecycle
    # -------------------------------------------------------------------------

    def call_start(self, call: Call) -> None:
        self._fire(CALL_TRANSITIONS["call_start"])

    def dns_start(self, call: Call, domain_name: str) -> None:
        self._fire(CALL_TRANSITIONS["dns_start"])

    def dns_end(self, call: Call, domain_name: str, inet_address_list: List[InetAddress]) -> None:
        self._fire(CALL_TRANSITIONS["dns_end"])

    def connect_start(self, call: Call, inet_socket_address: InetSocketAddress, proxy: Proxy) -> None:
        self._fire(CALL_TRANSITIONS["connect_start"])

    def secure_connect_start(self, call: Call) -> None:
        self._fire(CALL_TRANSITIONS["secure_connect_start"])

    def secure_connect_end(self, call: Call, handshake: Optional[Handshake] = None) -> None:
        self._fire(CALL_TRANSITIONS["secure_connect_end"])

    def connect_end(
        self,
        call: Call,
        inet_socket_address: InetSocketAddress,
        proxy: Proxy,
        protocol: Optional[NegotiatedProtocol] = None,
    ) -> None:
        self._fire(CALL_TRANSITIONS["connect_end"])

    def connect_failed(
        self,
        call: Call,
        inet_socket_address: InetSocketAddress,
        proxy: Proxy,
        protocol: Optional[NegotiatedProtocol],
        ioe: IOFailure,
    ) -> None:
        self._fire(CALL_TRANSITIONS["connect_failed"])

    def connection_acquired(self, call: Call, connection: Connection) -> None:
        self._fire(CALL_TRANSITIONS["connection_acquired"])

    def connection_released(self, call: Call, connection: Connection) -> None:
        self._fire(CALL_TRANSITIONS["connection_released"])

    def call_end(self, call: Call) -> None:
        self._fire(CALL_TRANSITIONS["call_end"])

    def call_failed(self, call: Call, ioe: IOFailure) -> None:
        self._fire(CALL_TRANSITIONS["call_failed"])

    # -------------------------------------------------------------------------
    # Request transfer
    # -------------------------------------------------------------------------

    def request_headers_start(self, call: Call) -> None:
        self._fire(REQUEST_TRANSITIONS["request_headers_start"])

    def request_headers_end(self, call: Call, request: Request) -> None:
        self._fire(REQUEST_TRANSITIONS["request_headers_end"])

    def request_body_start(self, call: Call) -> None:
        self._fire(REQUEST_TRANSITIONS["request_body_start"])

    def request_body_end(self, call: Call, byte_count: int) -> None:
        self._fire(REQUEST_TRANSITIONS["request_body_end"])

    # -------------------------------------------------------------------------
    # Response transfer
    # -------------------------------------------------------------------------

    def response_headers_start(self, call: Call) -> None:
        self._fire(RESPONSE_TRANSITIONS["response_headers_start"])

    def response_headers_end(self, call: Call, response: Response) -> None:
        self._fire(RESPONSE_TRANSITIONS["response_headers_end"])

    def response_body_start(self, call: Call) -> None:
        self._fire(RESPONSE_TRANSITIONS["response_body_start"])

    def response_body_end(self, call: Call, byte_count: int) -> None:
        self._fire(RESPONSE_TRANSITIONS["response_body_end"])

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _state_of(self, automaton: Automaton) -> Enum:
        if automaton is Automaton.CALL:
            return self._call_state
        if automaton is Automaton.REQUEST:
            return self._request_state
        return self._response_state

    def _fire(self, transition: Transition) -> None:
        """
        Check a transition's predecessors and apply it.

        The call gate is checked before the message automaton, so a message
        notification outside a held connection reports the call automaton.
        """
        try:
            if transition.call_gate:
                require_state(self._call_state, transition.call_gate, Automaton.CALL, transition.event)
            require_state(
                self._state_of(transition.automaton), transition.allowed, transition.automaton, transition.event
            )
        except InvalidTransitionError as e:
            self._logger.debug("Rejected %s: %s", transition.event, e.message)
            self._hooks.call_on_violation(e)
            if self._config.fail_fast:
                raise
            self._violations.append(e)

        self._hooks.call_pre_transition(transition)
        self._apply(transition)
        if self._config.log_transitions:
            self._logger.debug("%s -> %r", transition.event, self)
        self._hooks.call_post_transition(transition)

    def _apply(self, transition: Transition) -> None:
        if transition.automaton is Automaton.CALL:
            self._call_state = transition.target
        elif transition.automaton is Automaton.REQUEST:
            self._request_state = transition.target
        else:
            self._response_state = transition.target

        if transition.resets_messages:
            self._request_state = MessageState.READY
            self._response_state = MessageState.READY
