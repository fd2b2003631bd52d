#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import threading
from typing import Optional


class RequestIdGenerator:
    """Monotonic request id source

    One value per outbound request. Safe to call from several threads:
    the increment is done under a lock so two callers never get the same id.

    Example:
        gen = RequestIdGenerator()
        gen.next_id()  # 1
        gen.next_id()  # 2
    """

    def __init__(self, seed: int = 0) -> None:
        self._lock = threading.Lock()
        self._value = seed

    def next_id(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    def reset(self, seed: int = 0) -> None:
        with self._lock:
            self._value = seed

    @property
    def current(self) -> int:
        return self._value


_default_generator: Optional[RequestIdGenerator] = None
_default_lock = threading.Lock()


def get_default_generator() -> RequestIdGenerator:
    """Process-wide generator shared by adapters created without one"""
    global _default_generator
    with _default_lock:
        if _default_generator is None:
            _default_generator = RequestIdGenerator()
        return _default_generator


def reset_default_generator(seed: int = 0) -> None:
    """Restart the process-wide sequence (tests, process re-init)"""
    get_default_generator().reset(seed)
