# callstate/runtime/replay.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Tuple, Union

from callstate.core.listener import StateMachineEventListener
from callstate.core.transitions import NOTIFICATIONS
from callstate.interfaces.abc import EventListener
from callstate.interfaces.types import Call, EventArgs, EventName

# Placeholder payloads for notifications replayed by name only.
DEFAULT_ARGS: Dict[str, Tuple[Any, ...]] = {
    "call_start": (),
    "dns_start": (None,),
    "dns_end": (None, []),
    "connect_start": (None, None),
    "secure_connect_start": (),
    "secure_connect_end": (None,),
    "connect_end": (None, None, None),
    "connect_failed": (None, None, None, None),
    "connection_acquired": (None,),
    "connection_released": (None,),
    "request_headers_start": (),
    "request_headers_end": (None,),
    "request_body_start": (),
    "request_body_end": (0,),
    "response_headers_start": (),
    "response_headers_end": (None,),
    "response_body_start": (),
    "response_body_end": (0,),
    "call_end": (),
    "call_failed": (None,),
}

RecordedEvent = Union[EventName, Tuple[EventName, EventArgs]]


def replay(
    events: Iterable[RecordedEvent],
    listener: Optional[EventListener] = None,
    call: Call = None,
) -> EventListener:
    """
    Deliver a recorded sequence of notifications to a listener.

    Each entry is either a notification name, replayed with placeholder
    payloads, or a ``(name, args)`` pair whose args follow the call argument.
    Delivery stops at the first exception raised by the listener.

    :param events: Notifications in the order they occurred.
    :param listener: Listener to drive; a fresh StateMachineEventListener by default.
    :param call: Opaque call handle passed as the first argument.
    :return: The listener, after the last notification.
    :raises ValueError: If an entry names an unknown notification.
    """
    if listener is None:
        listener = StateMachineEventListener()

    for entry in events:
        if isinstance(entry, str):
            name, args = entry, None
        else:
            name, args = entry
        if name not in NOTIFICATIONS:
            raise ValueError(f"Unknown notification: {name!r}")
        if args is None:
            args = DEFAULT_ARGS[name]
        getattr(listener, name)(call, *args)

    return listener
