# callstate/core/config.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from dataclasses import dataclass

from callstate.core.errors import ConfigurationError


@dataclass(frozen=True)
class ListenerConfig:
    """
    Immutable listener settings.

    Attributes:
        fail_fast: Raise on the first invalid notification. When False, the
            violation is recorded on the listener and the automaton advances.
        log_transitions: Log every accepted transition at DEBUG level
        logger_name: Logger used for transition and violation records
    """

    fail_fast: bool = True
    log_transitions: bool = False
    logger_name: str = "callstate.listener"

    def __post_init__(self) -> None:
        for name in ("fail_fast", "log_transitions"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ConfigurationError(f"{name} must be a bool, got {type(value).__name__}", name, value)
        if not isinstance(self.logger_name, str) or not self.logger_name:
            raise ConfigurationError("logger_name must be a non-empty string", "logger_name", self.logger_name)

    @classmethod
    def default(cls) -> "ListenerConfig":
        return cls()
