# callstate/core/factory.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import List, Optional

from callstate.core.config import ListenerConfig
from callstate.core.listener import StateMachineEventListener
from callstate.interfaces.abc import AbstractHook
from callstate.interfaces.types import Call


class StateMachineEventListenerFactory:
    """
    Creates one fresh StateMachineEventListener per call.

    The factory holds no per-call state. Every listener it creates starts in
    NEW/READY/READY and receives the factory's config and hooks.
    """

    def __init__(self, config: Optional[ListenerConfig] = None, hooks: Optional[List[AbstractHook]] = None) -> None:
        self._config = config or ListenerConfig.default()
        self._hooks = list(hooks or [])

    @property
    def config(self) -> ListenerConfig:
        return self._config

    def create(self, call: Call) -> StateMachineEventListener:
        """
        :param call: The call the listener will observe; not retained.
        :return: A new listener.
        """
        return StateMachineEventListener(config=self._config, hooks=self._hooks)

    def __call__(self, call: Call) -> StateMachineEventListener:
        return self.create(call)


FACTORY = StateMachineEventListenerFactory()
