#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar, Optional, Union


class MessageType(IntEnum):
    """Outbound message kinds. The value indexes the send table."""

    REGISTER_REQUEST = 0
    PROPERTY_POST = 1
    EVENT_POST = 2
    PROPERTY_SET_REPLY = 3
    SERVICE_REPLY = 4
    PROPERTY_BATCH_POST = 5
    GET_DESIRED = 6
    DELETE_DESIRED = 7
    RAW_DATA = 8


class RecvType(IntEnum):
    """Inbound decoded message kinds"""

    REGISTER_INFO = 0
    GENERIC_REPLY = 1
    PROPERTY_SET = 2
    ASYNC_SERVICE_INVOKE = 3


class ServiceReplyMode(IntEnum):
    ASYNC = 0
    SYNC = 1
    # Message text is published as the whole payload
    RAW = 2


# ---- outbound ----

class DmMessage:
    """
    Base of every outbound message

    Each subclass carries only the fields its payload template needs,
    plus an optional ``device_name`` that overrides the transport default.
    """

    msg_type: ClassVar[int]
    device_name: Optional[str]


@dataclass(frozen=True)
class RegisterRequest(DmMessage):
    """
    Ask the platform for device registration info.

    Example (payload):
        {"id":"1","eventTime":"1700000000000"}
    """

    msg_type: ClassVar[int] = MessageType.REGISTER_REQUEST

    time: Optional[str] = None
    device_name: Optional[str] = None


@dataclass(frozen=True)
class PropertyPost(DmMessage):
    """
    Report device properties.

    ``params`` is a pre-rendered JSON fragment placed inside the
    "devices" array, e.g. '{"temperature":23.5}'.
    """

    msg_type: ClassVar[int] = MessageType.PROPERTY_POST

    params: Optional[str]
    device_name: Optional[str] = None


@dataclass(frozen=True)
class PropertyBatchPost(DmMessage):
    """Same wire format as PropertyPost; ``params`` may hold several devices."""

    msg_type: ClassVar[int] = MessageType.PROPERTY_BATCH_POST

    params: Optional[str]
    device_name: Optional[str] = None


@dataclass(frozen=True)
class EventPost(DmMessage):
    """
    Report an event.

    Example (payload):
        {"id":"7","time":"1700000000000","identifier":"overheat","data":{"t":90}}
    """

    msg_type: ClassVar[int] = MessageType.EVENT_POST

    event_id: Optional[str]
    params: Optional[str]
    time: Optional[str] = None
    device_name: Optional[str] = None


@dataclass(frozen=True)
class PropertySetReply(DmMessage):
    """Answer to a property set; echoes the peer's ``msg_id``."""

    msg_type: ClassVar[int] = MessageType.PROPERTY_SET_REPLY

    msg_id: int
    code: int
    data: Optional[str]
    device_name: Optional[str] = None


@dataclass(frozen=True)
class ServiceReply(DmMessage):
    """
    Answer to a service invocation.

    If ``msg_id`` is None a fresh request id is generated, otherwise the
    given id is echoed back.
    """

    msg_type: ClassVar[int] = MessageType.SERVICE_REPLY

    code: Optional[Union[int, str]]
    message: Optional[str]
    msg_id: Optional[int] = None
    mode: ServiceReplyMode = ServiceReplyMode.ASYNC
    device_name: Optional[str] = None


@dataclass(frozen=True)
class GetDesired(DmMessage):
    msg_type: ClassVar[int] = MessageType.GET_DESIRED

    params: Optional[str]
    device_name: Optional[str] = None


@dataclass(frozen=True)
class DeleteDesired(DmMessage):
    msg_type: ClassVar[int] = MessageType.DELETE_DESIRED

    params: Optional[str]
    device_name: Optional[str] = None


@dataclass(frozen=True)
class RawData(DmMessage):
    msg_type: ClassVar[int] = MessageType.RAW_DATA

    data: Optional[bytes]
    device_name: Optional[str] = None


# ---- inbound ----

class DmRecv:
    """Base of every decoded inbound message"""

    recv_type: ClassVar[int]
    device_name: str


@dataclass(frozen=True)
class RegisterInfo(DmRecv):
    """
    Registration info pushed by the platform.

    ``device_info`` is the raw "deviceInfos" value, None when absent.
    """

    recv_type: ClassVar[int] = RecvType.REGISTER_INFO

    device_name: str
    msg_id: int
    device_info: Optional[str] = None


@dataclass(frozen=True)
class GenericReply(DmRecv):
    """Platform reply to an uplink request, correlated by ``msg_id``."""

    recv_type: ClassVar[int] = RecvType.GENERIC_REPLY

    device_name: str
    product_key: str
    msg_id: int
    code: int
    data: str
    message: Optional[str] = None


@dataclass(frozen=True)
class PropertySet(DmRecv):
    """
    Property set request. Reply with PropertySetReply(msg_id=...)
    unless automatic replies are enabled.
    """

    recv_type: ClassVar[int] = RecvType.PROPERTY_SET

    device_name: str
    msg_id: int
    service_id: str
    eid: str
    params: str


@dataclass(frozen=True)
class ServiceInvoke(DmRecv):
    recv_type: ClassVar[int] = RecvType.ASYNC_SERVICE_INVOKE

    device_name: str
    msg_id: int
    identifier: str
    params: str
