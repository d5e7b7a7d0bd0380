# callstate/interfaces/types.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Any, Dict, NamedTuple, Sequence

# Payloads handed to listeners by the network client. The validator only
# needs to know that a notification fired, so all of them stay opaque.
Call = Any
Connection = Any
InetAddress = Any
InetSocketAddress = Any
Proxy = Any
NegotiatedProtocol = Any
Handshake = Any
Request = Any
Response = Any
IOFailure = BaseException

EventName = str
EventArgs = Sequence[Any]


class ValidationResult(NamedTuple):
    severity: str
    message: str
    context: Dict[str, Any]
