# callstate/tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import pytest

from callstate.core.config import ListenerConfig
from callstate.core.listener import StateMachineEventListener
from callstate.core.states import CallState, MessageState
from callstate.tests.utils import RecordingHook


def pytest_configure(config):
    """Register custom marks."""
    config.addinivalue_line("markers", "property: mark test as a property-based test")


@pytest.fixture
def listener() -> StateMachineEventListener:
    """A fresh fail-fast listener."""
    return StateMachineEventListener()


@pytest.fixture
def recording_listener() -> StateMachineEventListener:
    """A listener that records violations instead of raising."""
    return StateMachineEventListener(config=ListenerConfig(fail_fast=False))


@pytest.fixture
def recording_hook() -> RecordingHook:
    return RecordingHook()


@pytest.fixture
def held_listener(listener) -> StateMachineEventListener:
    """A listener whose call currently holds a connection."""
    listener.call_start(None)
    listener.connection_acquired(None, None)
    assert listener.call_state is CallState.CONNECTION_HELD
    assert listener.request_state is MessageState.READY
    return listener
