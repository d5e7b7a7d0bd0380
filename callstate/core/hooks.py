# callstate/core/hooks.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import logging
from typing import TYPE_CHECKING, Any, Callable, List, Optional

from callstate.core.errors import HookError
from callstate.interfaces.abc import AbstractHook

if TYPE_CHECKING:
    from callstate.core.errors import InvalidTransitionError
    from callstate.core.transitions import Transition

logger = logging.getLogger(__name__)

_HOOK_METHODS = ("pre_transition", "post_transition", "on_violation")


class HookManager:
    """
    Manages hooks that observe a listener's transitions and violations.

    Hooks are called in registration order. A hook that raises is logged and
    skipped; the remaining hooks still run and the listener's behaviour is
    unchanged.
    """

    def __init__(self, hooks: Optional[List[AbstractHook]] = None) -> None:
        self._hooks: List[AbstractHook] = []
        for hook in hooks or []:
            self.register_hook(hook)

    @property
    def hooks(self) -> List[AbstractHook]:
        return list(self._hooks)

    def register_hook(self, hook: AbstractHook) -> None:
        """
        Add a hook.

        :param hook: Object implementing AbstractHook.
        :raises HookError: If the object lacks any hook method.
        """
        if not isinstance(hook, AbstractHook):
            raise HookError(
                f"Hook {hook!r} does not implement AbstractHook",
                details={"required": list(_HOOK_METHODS)},
            )
        self._hooks.append(hook)

    def unregister_hook(self, hook: AbstractHook) -> None:
        """Remove a hook; unknown hooks are ignored."""
        if hook in self._hooks:
            self._hooks.remove(hook)

    def call_pre_transition(self, transition: "Transition") -> None:
        self._invoke("pre_transition", transition)

    def call_post_transition(self, transition: "Transition") -> None:
        self._invoke("post_transition", transition)

    def call_on_violation(self, error: "InvalidTransitionError") -> None:
        self._invoke("on_violation", error)

    def _invoke(self, method_name: str, arg: Any) -> None:
        for hook in list(self._hooks):
            method: Callable[[Any], None] = getattr(hook, method_name)
            try:
                method(arg)
            except Exception:
                logger.exception("Hook %r failed in %s", hook, method_name)


class LoggingHook:
    """
    Hook that writes accepted transitions and violations to a logger.
    """

    def __init__(self, logger_name: str = "callstate.hooks", level: int = logging.DEBUG) -> None:
        self.logger = logging.getLogger(logger_name)
        self.level = level

    def pre_transition(self, transition: "Transition") -> None:
        pass

    def post_transition(self, transition: "Transition") -> None:
        self.logger.log(
            self.level,
            "%s: %s automaton -> %s",
            transition.event,
            transition.automaton.value,
            transition.target.name,
        )

    def on_violation(self, error: "InvalidTransitionError") -> None:
        self.logger.error("Invalid transition: %s", error.message)
