#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import logging
from typing import Protocol

from ..lib.constants import DIAG_LOGGER_NAME

logger = logging.getLogger(__name__)

# 00 30 01 <type> 00 31 04 <id:4>
_DIAG_PREFIX = bytes((0x00, 0x30, 0x01))
_DIAG_INFIX = bytes((0x00, 0x31, 0x04))
DIAG_RECORD_LEN = 11


class DiagSink(Protocol):
    def record(self, data: bytes) -> None:
        """Store one diagnostic record."""


class LoggingDiagSink:
    """Default sink: hex dump of each record at DEBUG level"""

    def __init__(self, name: str = DIAG_LOGGER_NAME) -> None:
        self._logger = logging.getLogger(name)

    def record(self, data: bytes) -> None:
        self._logger.debug("dm diag: %s", data.hex())


def build_diag_record(msg_type: int, msg_id: int) -> bytes:
    """
    Build the 11-byte request/response record

    msg_type: 0 = request, 1 = response
    msg_id:   request id, truncated to 32 bits big-endian
    """
    return (
        _DIAG_PREFIX
        + bytes((msg_type & 0xFF,))
        + _DIAG_INFIX
        + (msg_id & 0xFFFFFFFF).to_bytes(4, "big")
    )


def append_diag_data(sink: DiagSink, msg_type: int, msg_id: int) -> None:
    """Forward a record to the sink. Sink failures never reach the caller."""
    try:
        sink.record(build_diag_record(msg_type, msg_id))
    except Exception:
        logger.debug("Diagnostic sink failed (type=%r id=%r)", msg_type, msg_id, exc_info=True)
