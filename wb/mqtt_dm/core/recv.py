#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Inbound dispatch: (topic, payload) -> typed message -> registered callback

One table entry per subscribed downlink pattern. The pattern is only used
to subscribe; at decode time dynamic values are taken positionally from
the literal topic that arrived.

Decode functions never raise DataModelError: a malformed message is logged
and dropped so the subscription keeps working for the next one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional, Tuple

from ..lib import constants as c
from .diag import append_diag_data
from .errors import DataModelError, FieldMissingError
from .field_store import FieldStore, Payload, str_to_uint
from .models import (
    DmRecv,
    GenericReply,
    PropertySet,
    PropertySetReply,
    RegisterInfo,
    ServiceInvoke,
)
from .topic import topic_level

if TYPE_CHECKING:
    from .data_model import DataModel

logger = logging.getLogger(__name__)

DecodeFunc = Callable[["DataModel", str, Payload], None]


@dataclass(frozen=True)
class RecvEntry:
    topic: str
    decode: DecodeFunc


def _optional_field(fs: FieldStore, payload: Payload, key: str) -> Optional[str]:
    try:
        return fs.lookup(payload, key)
    except FieldMissingError:
        return None


def _deliver(dm: "DataModel", recv: DmRecv) -> None:
    handler = dm.recv_handler
    if handler is not None:
        handler(dm, recv, dm.userdata)


def _recv_register_info(dm: "DataModel", topic: str, payload: Payload) -> None:
    if dm.recv_handler is None:
        return
    logger.debug("DM recv register info: %s", topic)

    fs = dm.field_store
    try:
        device_name = topic_level(topic, c.TOPIC_LEVEL_DEVICE_NAME)
        msg_id = str_to_uint(fs.lookup(payload, c.JSON_KEY_ID))
    except DataModelError as e:
        logger.warning("DM parse register info failed (topic=%r): %r", topic, e)
        return

    recv = RegisterInfo(
        device_name=device_name,
        msg_id=msg_id,
        device_info=_optional_field(fs, payload, c.JSON_KEY_DEV_INFO),
    )
    append_diag_data(dm.diag_sink, c.DM_DIAG_MSG_TYPE_RSP, msg_id)
    _deliver(dm, recv)


def _recv_generic_reply(dm: "DataModel", topic: str, payload: Payload) -> None:
    if dm.recv_handler is None:
        return
    logger.debug("DM recv generic reply: %s", topic)

    fs = dm.field_store
    try:
        product_key = topic_level(topic, c.TOPIC_LEVEL_PRODUCT_KEY)
        device_name = topic_level(topic, c.TOPIC_LEVEL_DEVICE_NAME)
        msg_id = str_to_uint(fs.lookup(payload, c.JSON_KEY_ID))
        code = str_to_uint(fs.lookup(payload, c.JSON_KEY_CODE))
        data = fs.lookup(payload, c.JSON_KEY_DATA)
    except DataModelError as e:
        logger.warning("DM parse generic reply failed (topic=%r): %r", topic, e)
        return

    recv = GenericReply(
        device_name=device_name,
        product_key=product_key,
        msg_id=msg_id,
        code=code,
        data=data,
        message=_optional_field(fs, payload, c.JSON_KEY_MESSAGE),
    )
    append_diag_data(dm.diag_sink, c.DM_DIAG_MSG_TYPE_RSP, msg_id)
    _deliver(dm, recv)


def _recv_property_set(dm: "DataModel", topic: str, payload: Payload) -> None:
    if dm.recv_handler is None:
        return
    logger.debug("DM recv property set: %s", topic)

    fs = dm.field_store
    try:
        recv = PropertySet(
            device_name=topic_level(topic, c.TOPIC_LEVEL_DEVICE_NAME),
            msg_id=str_to_uint(fs.lookup(payload, c.JSON_KEY_ID)),
            service_id=fs.lookup(payload, c.JSON_KEY_SERVICE_ID),
            eid=fs.lookup(payload, c.JSON_KEY_EID),
            params=fs.lookup(payload, c.JSON_KEY_PARAMS),
        )
    except DataModelError as e:
        logger.warning("DM parse property set failed (topic=%r): %r", topic, e)
        return

    _deliver(dm, recv)

    if dm.post_reply:
        reply = PropertySetReply(
            msg_id=recv.msg_id,
            code=c.AUTO_REPLY_CODE,
            data=c.AUTO_REPLY_DATA,
            device_name=recv.device_name,
        )
        try:
            dm.send(reply)
        except DataModelError as e:
            logger.warning("DM auto reply to property set %d failed: %r", recv.msg_id, e)


def _recv_async_service_invoke(dm: "DataModel", topic: str, payload: Payload) -> None:
    if dm.recv_handler is None:
        return
    logger.debug("DM recv async service invoke: %s", topic)

    fs = dm.field_store
    try:
        recv = ServiceInvoke(
            device_name=topic_level(topic, c.TOPIC_LEVEL_DEVICE_NAME),
            msg_id=str_to_uint(fs.lookup(payload, c.JSON_KEY_ID)),
            identifier=fs.lookup(payload, c.JSON_KEY_IDENTIFIER),
            params=fs.lookup(payload, c.JSON_KEY_DATA),
        )
    except DataModelError as e:
        logger.warning("DM parse async service invoke failed (topic=%r): %r", topic, e)
        return

    _deliver(dm, recv)


RECV_TOPIC_MAPPING: Tuple[RecvEntry, ...] = (
    RecvEntry(c.TOPIC_DOWN_REGISTER_INFO, _recv_register_info),
    RecvEntry(c.TOPIC_DOWN_SET, _recv_property_set),
    RecvEntry(c.TOPIC_DOWN_SERVICE, _recv_async_service_invoke),
    RecvEntry(c.TOPIC_DOWN_EVENT_REPLY, _recv_generic_reply),
)
