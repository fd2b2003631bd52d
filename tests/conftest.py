#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import pytest

from wb.mqtt_dm.core.data_model import DataModel, DmOption
from wb.mqtt_dm.core.request_id import RequestIdGenerator
from wb.mqtt_dm.transport.base import MessageHandler, ProcessHandler, Transport, TransportEvent


class FakeTransport(Transport):
    """
    Minimal transport stub:
    - publish() collects (topic, payload, qos) and returns `status`
    - deliver() calls the handler registered for an exact pattern
    """

    def __init__(self, device_name: Optional[str] = "devA", status: int = 0) -> None:
        self._device_name = device_name
        self.status = status
        self.published: List[Tuple[str, bytes, int]] = []
        self.patterns: Dict[str, MessageHandler] = {}
        self.process_handlers: List[ProcessHandler] = []

    @property
    def device_name(self) -> Optional[str]:
        return self._device_name

    def publish(self, topic: str, payload: bytes, qos: int = 0) -> int:
        self.published.append((topic, payload, qos))
        return self.status

    def register_pattern(self, pattern: str, handler: MessageHandler) -> None:
        self.patterns[pattern] = handler

    def deregister_pattern(self, pattern: str) -> None:
        self.patterns.pop(pattern, None)

    def add_process_handler(self, handler: ProcessHandler) -> None:
        self.process_handlers.append(handler)

    def remove_process_handler(self, handler: ProcessHandler) -> None:
        if handler in self.process_handlers:
            self.process_handlers.remove(handler)

    def deliver(self, pattern: str, topic: str, payload: bytes) -> None:
        self.patterns[pattern](topic, payload)

    def emit(self, event: TransportEvent) -> None:
        for handler in list(self.process_handlers):
            handler(event)


class RecordingSink:
    def __init__(self) -> None:
        self.records: List[bytes] = []

    def record(self, data: bytes) -> None:
        self.records.append(data)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def received() -> List[Tuple[Any, Any]]:
    return []


@pytest.fixture
def dm(transport: FakeTransport, sink: RecordingSink, received) -> DataModel:
    """DataModel attached to a FakeTransport with a fresh id sequence"""
    model = DataModel(id_generator=RequestIdGenerator(), diag_sink=sink)

    def on_recv(dm, recv, userdata) -> None:
        received.append((recv, userdata))

    model.setopt(DmOption.RECV_HANDLER, on_recv)
    model.setopt(DmOption.USERDATA, "ctx")
    model.setopt(DmOption.MQTT_HANDLE, transport)
    return model
