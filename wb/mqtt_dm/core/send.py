#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Outbound dispatch: typed message -> (topic, payload) -> transport

One table entry per MessageType, indexed by the type value. Each entry owns
the topic template and the encode function rendering the payload.

Encode functions return:
  - the new request id for requests (register, posts, desired, service
    replies without a caller id)
  - 0 for replies that echo a peer-chosen id and for raw data
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Sequence, Tuple, Type, Union

from ..lib import constants as c
from .diag import append_diag_data
from .errors import (
    InvalidArgumentError,
    MessageInvalidError,
    MissingDeviceNameError,
    StateCode,
    TransportError,
    TransportUnavailableError,
)
from .models import (
    DeleteDesired,
    DmMessage,
    EventPost,
    GetDesired,
    MessageType,
    PropertyBatchPost,
    PropertyPost,
    PropertySetReply,
    RawData,
    RegisterRequest,
    ServiceReply,
    ServiceReplyMode,
)
from .template import render

if TYPE_CHECKING:
    from .data_model import DataModel

logger = logging.getLogger(__name__)

EncodeFunc = Callable[["DataModel", str, DmMessage], int]


@dataclass(frozen=True)
class SendEntry:
    topic: str
    message_cls: Type[DmMessage]
    encode: EncodeFunc


def now_ms() -> str:
    return str(int(time.time() * 1000))


def _require(value, name: str, code: int = StateCode.MSG_PARAMS_IS_NULL) -> None:
    if value is None:
        raise MessageInvalidError("Required field %r is missing" % name, code=code)


def _require_text(value, name: str, code: int = StateCode.MSG_PARAMS_IS_NULL) -> None:
    """Fields substituted into a payload template must be str"""
    _require(value, name, code)
    if not isinstance(value, str):
        raise MessageInvalidError(
            "Field %r must be str, got %s" % (name, type(value).__name__), code=code
        )


def _publish(dm: "DataModel", topic: str, payload: Union[str, bytes]) -> None:
    transport = dm.transport
    if transport is None:
        raise TransportUnavailableError("Transport detached")
    if isinstance(payload, str):
        payload = payload.encode("utf-8")
    status = transport.publish(topic, payload, c.DM_PUBLISH_QOS)
    if status != 0:
        raise TransportError("Publish to %r failed: %r" % (topic, status), code=status)


def _send_request(dm: "DataModel", topic: str, template: str, values: Sequence[str]) -> int:
    msg_id = dm.id_generator.next_id()
    payload = render(template, [str(msg_id), *values])
    append_diag_data(dm.diag_sink, c.DM_DIAG_MSG_TYPE_REQ, msg_id)
    _publish(dm, topic, payload)
    logger.debug("DM request %d sent to %s", msg_id, topic)
    return msg_id


# ---- encode functions ----

def _send_register_request(dm: "DataModel", topic: str, msg: RegisterRequest) -> int:
    event_time = msg.time or now_ms()
    _require_text(event_time, "time")
    return _send_request(dm, topic, c.REGISTER_REQUEST_FMT, [event_time])


def _send_property_post(dm: "DataModel", topic: str, msg: Union[PropertyPost, PropertyBatchPost]) -> int:
    _require_text(msg.params, "params")
    return _send_request(dm, topic, c.PROPERTY_POST_FMT, [msg.params])


def _send_event_post(dm: "DataModel", topic: str, msg: EventPost) -> int:
    _require_text(msg.event_id, "event_id")
    _require_text(msg.params, "params")
    event_time = msg.time or now_ms()
    _require_text(event_time, "time")
    return _send_request(
        dm, topic, c.EVENT_POST_FMT, [event_time, msg.event_id, msg.params]
    )


def _send_property_set_reply(dm: "DataModel", topic: str, msg: PropertySetReply) -> int:
    _require(msg.msg_id, "msg_id")
    _require(msg.code, "code")
    _require_text(msg.data, "data", StateCode.MSG_DATA_IS_NULL)
    payload = render(c.PROPERTY_SET_REPLY_FMT, [str(msg.msg_id), str(msg.code), msg.data])
    _publish(dm, topic, payload)
    return StateCode.SUCCESS


def _send_service_reply(dm: "DataModel", topic: str, msg: ServiceReply) -> int:
    if msg.mode == ServiceReplyMode.RAW:
        _require(msg.message, "message")
        _publish(dm, topic, msg.message)
        return StateCode.SUCCESS

    _require(msg.code, "code")
    _require_text(msg.message, "message")

    if msg.msg_id is None:
        return _send_request(dm, topic, c.SERVICE_REPLY_FMT, [str(msg.code), msg.message])

    payload = render(c.SERVICE_REPLY_FMT, [str(msg.msg_id), str(msg.code), msg.message])
    _publish(dm, topic, payload)
    return StateCode.SUCCESS


def _send_desired(dm: "DataModel", topic: str, msg: Union[GetDesired, DeleteDesired]) -> int:
    _require_text(msg.params, "params")
    return _send_request(dm, topic, c.DESIRED_REQUEST_FMT, [msg.params])


def _send_raw_data(dm: "DataModel", topic: str, msg: RawData) -> int:
    _require(msg.data, "data", StateCode.MSG_DATA_IS_NULL)
    _publish(dm, topic, msg.data)
    return StateCode.SUCCESS


SEND_TOPIC_MAPPING: Tuple[SendEntry, ...] = (
    SendEntry(c.TOPIC_UP_GET_DEVICE_INFO, RegisterRequest, _send_register_request),
    SendEntry(c.TOPIC_UP_DATAS, PropertyPost, _send_property_post),
    SendEntry(c.TOPIC_UP_EVENT, EventPost, _send_event_post),
    SendEntry(c.TOPIC_UP_SET_REPLY, PropertySetReply, _send_property_set_reply),
    SendEntry(c.TOPIC_UP_SERVICE_REPLY, ServiceReply, _send_service_reply),
    SendEntry(c.TOPIC_UP_DATAS, PropertyBatchPost, _send_property_post),
    SendEntry(c.TOPIC_UP_DESIRED_GET, GetDesired, _send_desired),
    SendEntry(c.TOPIC_UP_DESIRED_DELETE, DeleteDesired, _send_desired),
    SendEntry(c.TOPIC_UP_RAW, RawData, _send_raw_data),
)


def prepare_send_topic(dm: "DataModel", msg: DmMessage) -> str:
    """Render the uplink topic, resolving the device name first"""
    device_name = msg.device_name
    if device_name is None and dm.transport is not None:
        device_name = dm.transport.device_name
    if device_name is None:
        raise MissingDeviceNameError("No device name in message and no transport default")
    return render(SEND_TOPIC_MAPPING[msg.msg_type].topic, [device_name])


def send_message(dm: "DataModel", msg: DmMessage) -> int:
    if not isinstance(msg, DmMessage):
        raise InvalidArgumentError("Message must be a DmMessage, got %r" % (msg,))

    try:
        msg_type = int(getattr(msg, "msg_type", None))
    except (TypeError, ValueError):
        raise InvalidArgumentError(
            "Message %s carries no valid type" % type(msg).__name__,
            code=StateCode.USER_INPUT_OUT_RANGE,
        ) from None
    if not 0 <= msg_type < len(SEND_TOPIC_MAPPING):
        raise InvalidArgumentError(
            "Message type %r out of range" % msg_type, code=StateCode.USER_INPUT_OUT_RANGE
        )

    entry = SEND_TOPIC_MAPPING[msg_type]
    if not isinstance(msg, entry.message_cls):
        raise InvalidArgumentError(
            "Message type %s does not match %s" % (MessageType(msg_type).name, type(msg).__name__)
        )

    if dm.transport is None:
        raise TransportUnavailableError("Transport is not attached")

    topic = prepare_send_topic(dm, msg)
    return entry.encode(dm, topic, msg)
