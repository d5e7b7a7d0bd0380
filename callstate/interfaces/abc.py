# callstate/interfaces/abc.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import TYPE_CHECKING, List, Optional, Protocol, runtime_checkable

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

if TYPE_CHECKING:
    from callstate.core.errors import InvalidTransitionError
    from callstate.core.transitions import Transition


class EventListener:
    """
    Receives lifecycle notifications for a single call.

    A network client calls one method per observed event, in the order the
    events occur. Every method is a no-op here; subclasses override the ones
    they care about. Payload arguments are whatever the client passes and
    are not interpreted.

    Runtime Invariants:
    - One listener instance per call
    - Notifications for one call never overlap
    """

    def call_start(self, call: Call) -> None:
        pass

    def dns_start(self, call: Call, domain_name: str) -> None:
        pass

    def dns_end(self, call: Call, domain_name: str, inet_address_list: List[InetAddress]) -> None:
        pass

    def connect_start(self, call: Call, inet_socket_address: InetSocketAddress, proxy: Proxy) -> None:
        pass

    def secure_connect_start(self, call: Call) -> None:
        pass

    def secure_connect_end(self, call: Call, handshake: Optional[Handshake] = None) -> None:
        pass

    def connect_end(
        self,
        call: Call,
        inet_socket_address: InetSocketAddress,
        proxy: Proxy,
        protocol: Optional[NegotiatedProtocol] = None,
    ) -> None:
        pass

    def connect_failed(
        self,
        call: Call,
        inet_socket_address: InetSocketAddress,
        proxy: Proxy,
        protocol: Optional[NegotiatedProtocol],
        ioe: IOFailure,
    ) -> None:
        pass

    def connection_acquired(self, call: Call, connection: Connection) -> None:
        pass

    def connection_released(self, call: Call, connection: Connection) -> None:
        pass

    def request_headers_start(self, call: Call) -> None:
        pass

    def request_headers_end(self, call: Call, request: Request) -> None:
        pass

    def request_body_start(self, call: Call) -> None:
        pass

    def request_body_end(self, call: Call, byte_count: int) -> None:
        pass

    def response_headers_start(self, call: Call) -> None:
        pass

    def response_headers_end(self, call: Call, response: Response) -> None:
        pass

    def response_body_start(self, call: Call) -> None:
        pass

    def response_body_end(self, call: Call, byte_count: int) -> None:
        pass

    def call_end(self, call: Call) -> None:
        pass

    def call_failed(self, call: Call, ioe: IOFailure) -> None:
        pass


@runtime_checkable
class EventListenerFactory(Protocol):
    """
    Protocol for per-call listener factories.

    Runtime Invariants:
    - Each create() returns a new listener, never a shared one
    """

    def create(self, call: Call) -> EventListener: ...


@runtime_checkable
class AbstractHook(Protocol):
    """
    Protocol for listener hooks.

    Runtime Invariants:
    - Hooks don't modify automaton state
    - Hook failures don't affect validation
    """

    def pre_transition(self, transition: "Transition") -> None: ...

    def post_transition(self, transition: "Transition") -> None: ...

    def on_violation(self, error: "InvalidTransitionError") -> None: ...
