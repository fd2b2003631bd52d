#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Error taxonomy of the data-model adapter.

Every error carries a negative ``code`` so callers that only care about
status values can still tell failures apart.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Optional


class StateCode(IntEnum):
    SUCCESS = 0

    # User input (-0x0100 block)
    USER_INPUT_NULL_POINTER = -0x0101
    USER_INPUT_OUT_RANGE = -0x0102
    MISSING_DEVICE_NAME = -0x0103

    # Rendering
    RENDER_FAILED = -0x0201

    # Data model (-0x0F00 block)
    MQTT_HANDLE_IS_NULL = -0x0F01
    MSG_PARAMS_IS_NULL = -0x0F02
    MSG_DATA_IS_NULL = -0x0F03
    INTERNAL_TOPIC_ERROR = -0x0F04
    FIELD_MISSING = -0x0F05
    FIELD_MALFORMED = -0x0F06


class DataModelError(Exception):
    """Base error for the data-model adapter."""

    code: int = -1

    def __init__(self, message: str = "", code: Optional[int] = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code


class InvalidArgumentError(DataModelError):
    """Raised on a missing handle/message or an out-of-range kind/option."""

    code = StateCode.USER_INPUT_NULL_POINTER


class MissingDeviceNameError(DataModelError):
    """Raised when neither the message nor the transport names a device."""

    code = StateCode.MISSING_DEVICE_NAME


class TransportUnavailableError(DataModelError):
    """Raised when sending without an attached transport."""

    code = StateCode.MQTT_HANDLE_IS_NULL


class MessageInvalidError(DataModelError):
    """Raised when a required outbound field is missing."""

    code = StateCode.MSG_PARAMS_IS_NULL


class RenderError(DataModelError):
    """Raised when a template cannot be rendered with the given values."""

    code = StateCode.RENDER_FAILED


class TopicStructureError(DataModelError):
    """Raised when an inbound topic is shorter than its pattern implies."""

    code = StateCode.INTERNAL_TOPIC_ERROR


class FieldMissingError(DataModelError):
    """Raised when an inbound payload lacks a required field."""

    code = StateCode.FIELD_MISSING


class FieldMalformedError(DataModelError):
    """Raised when an inbound payload or field cannot be interpreted."""

    code = StateCode.FIELD_MALFORMED


class TransportError(DataModelError):
    """Raised when the transport reports a publish/subscribe failure.

    ``code`` holds the status returned by the transport, unmodified.
    """
