"""callstate: lifecycle ordering validator for HTTP client event listeners

Attaches to a network client's instrumentation layer and fails a test the
moment the client reports lifecycle events out of order.

Responsibilities:
    - Call, request and response automata
    - Transition tables and predecessor checks
    - Per-call listener factory
    - Hooks for observing transitions and violations

Cross-cutting Concerns:
    Thread Safety:
        - One listener per call, never shared
        - Notifications for one call must be serialized by the client

    Error Handling:
        - InvalidTransitionError raised from the offending notification
        - Optional recording mode for non-test embedding

    Logging:
        - Standard library logging, DEBUG for transitions
"""

from callstate.core.config import ListenerConfig
from callstate.core.errors import CallStateError, ConfigurationError, HookError, InvalidTransitionError
from callstate.core.factory import FACTORY, StateMachineEventListenerFactory
from callstate.core.listener import ListenerSnapshot, StateMachineEventListener
from callstate.core.states import Automaton, CallState, MessageState
from callstate.interfaces.abc import EventListener

__version__ = "0.1.0"

__all__ = [
    "Automaton",
    "CallState",
    "CallStateError",
    "ConfigurationError",
    "EventListener",
    "FACTORY",
    "HookError",
    "InvalidTransitionError",
    "ListenerConfig",
    "ListenerSnapshot",
    "MessageState",
    "StateMachineEventListener",
    "StateMachineEventListenerFactory",
]
