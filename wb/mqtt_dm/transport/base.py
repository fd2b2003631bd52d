#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Optional

# (topic, payload) of a received publish
MessageHandler = Callable[[str, bytes], None]


class TransportEvent(Enum):
    # Transport is being torn down, handles to it must be dropped
    DEINIT = "deinit"


ProcessHandler = Callable[[TransportEvent], None]


class Transport(ABC):
    """
    Base interface for a publish/subscribe transport

    Transport responsibilities:
      - publish(): deliver a rendered (topic, payload) pair
      - register_pattern(): route received publishes matching a pattern
        to a handler, using the transport's own pattern matcher
      - deregister_pattern(): undo register_pattern()
      - device_name: default device identity, None if not configured
      - process handlers: notify interested parties about lifecycle events
    """

    @property
    @abstractmethod
    def device_name(self) -> Optional[str]:
        raise NotImplementedError

    @abstractmethod
    def publish(self, topic: str, payload: bytes, qos: int = 0) -> int:
        """
        Publish payload to topic

        Returns 0 on success, any other value is a transport status code
        """
        raise NotImplementedError

    @abstractmethod
    def register_pattern(self, pattern: str, handler: MessageHandler) -> None:
        raise NotImplementedError

    @abstractmethod
    def deregister_pattern(self, pattern: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def add_process_handler(self, handler: ProcessHandler) -> None:
        raise NotImplementedError

    @abstractmethod
    def remove_process_handler(self, handler: ProcessHandler) -> None:
        raise NotImplementedError
