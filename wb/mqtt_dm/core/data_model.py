#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import functools
import logging
from enum import IntEnum
from typing import Any, Callable, List, Optional

from ..transport.base import Transport, TransportEvent
from .diag import DiagSink, LoggingDiagSink
from .errors import InvalidArgumentError, MissingDeviceNameError, StateCode
from .field_store import FieldStore, JsonFieldStore
from .models import DmMessage, DmRecv
from .recv import RECV_TOPIC_MAPPING
from .request_id import RequestIdGenerator, get_default_generator
from .send import send_message
from .template import render

logger = logging.getLogger(__name__)

RecvHandler = Callable[["DataModel", DmRecv, Any], None]


class DmOption(IntEnum):
    # Transport to send through; registers downlink patterns
    MQTT_HANDLE = 0
    # Callable(dm, recv, userdata) receiving decoded downlink messages
    RECV_HANDLER = 1
    # Opaque value handed back to the receive handler
    USERDATA = 2
    # bool: acknowledge property set messages automatically
    POST_REPLY = 3


class DataModel:
    """
    Thing-model adapter over a publish/subscribe transport

    Lifecycle:
      dm = DataModel()
      dm.setopt(DmOption.RECV_HANDLER, on_recv)
      dm.setopt(DmOption.MQTT_HANDLE, transport)   # subscribes downlink topics
      dm.send(PropertyPost(params='{"t":23.5}'))   # -> request id
      dm.deinit()

    Notes:
      - send() raises DataModelError subclasses, each with a negative code
      - receive handler, userdata and transport are expected to stay stable
        while sends run concurrently; only the id generator is shared state
    """

    def __init__(
        self,
        *,
        id_generator: Optional[RequestIdGenerator] = None,
        diag_sink: Optional[DiagSink] = None,
        field_store: Optional[FieldStore] = None,
    ) -> None:
        self.id_generator = id_generator or get_default_generator()
        self.diag_sink = diag_sink or LoggingDiagSink()
        self.field_store = field_store or JsonFieldStore()

        self.transport: Optional[Transport] = None
        self.recv_handler: Optional[RecvHandler] = None
        self.userdata: Any = None
        self.post_reply: bool = True

        self._patterns: List[str] = []

    def setopt(self, option: DmOption, value: Any) -> None:
        if value is None:
            raise InvalidArgumentError("Option value must not be None")
        try:
            option = DmOption(option)
        except ValueError:
            raise InvalidArgumentError(
                "Unknown option %r" % (option,), code=StateCode.USER_INPUT_OUT_RANGE
            ) from None

        if option == DmOption.MQTT_HANDLE:
            self._attach(value)
        elif option == DmOption.RECV_HANDLER:
            self.recv_handler = value
        elif option == DmOption.USERDATA:
            self.userdata = value
        elif option == DmOption.POST_REPLY:
            self.post_reply = bool(value)

    def send(self, msg: DmMessage) -> int:
        """
        Render and publish an outbound message

        Returns the request id for requests, 0 for replies
        """
        return send_message(self, msg)

    def deinit(self) -> None:
        """Detach from the transport, best-effort for every pattern"""
        transport = self.transport
        self.transport = None
        if transport is None:
            return

        try:
            transport.remove_process_handler(self._on_transport_event)
        except Exception:
            logger.exception("Removing DM process handler failed")

        for pattern in self._patterns:
            try:
                transport.deregister_pattern(pattern)
            except Exception:
                logger.exception("Deregistering %r failed", pattern)
        self._patterns = []

    def _attach(self, transport: Transport) -> None:
        if self.transport is not None and self.transport is not transport:
            self.deinit()

        # The handle is kept even without a default device: sends that name
        # their device explicitly still work, only subscriptions are missing
        self.transport = transport
        device_name = transport.device_name
        if device_name is None:
            raise MissingDeviceNameError("Transport has no default device name")

        for entry in RECV_TOPIC_MAPPING:
            pattern = render(entry.topic, [device_name])
            if pattern in self._patterns:
                continue
            transport.register_pattern(pattern, functools.partial(entry.decode, self))
            self._patterns.append(pattern)
        transport.add_process_handler(self._on_transport_event)
        logger.info("DM attached to transport, device=%r patterns=%d", device_name, len(self._patterns))

    def _on_transport_event(self, event: TransportEvent) -> None:
        if event == TransportEvent.DEINIT:
            logger.info("Transport deinit, DM handle released")
            self.transport = None
            self._patterns = []
