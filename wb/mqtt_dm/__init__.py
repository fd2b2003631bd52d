#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Thing-model data adapter for MQTT devices

Maps property/event/service/registration messages onto
/v1/device/up/... and /v1/device/down/... topics.

Typical usage:
    from wb.mqtt_dm import DataModel, DmOption, PropertyPost
    from wb.mqtt_dm.transport.mqtt import MqttConnectionConfig, MqttTransport

    transport = MqttTransport(cfg=MqttConnectionConfig(host="localhost", device_name="devA"))
    dm = DataModel()
    dm.setopt(DmOption.MQTT_HANDLE, transport)
    transport.start()
    dm.send(PropertyPost(params='{"temperature":23.5}'))
"""

from .core.data_model import DataModel, DmOption, RecvHandler
from .core.errors import (
    DataModelError,
    FieldMalformedError,
    FieldMissingError,
    InvalidArgumentError,
    MessageInvalidError,
    MissingDeviceNameError,
    RenderError,
    StateCode,
    TopicStructureError,
    TransportError,
    TransportUnavailableError,
)
from .core.models import (
    DeleteDesired,
    DmMessage,
    DmRecv,
    EventPost,
    GenericReply,
    GetDesired,
    MessageType,
    PropertyBatchPost,
    PropertyPost,
    PropertySet,
    PropertySetReply,
    RawData,
    RecvType,
    RegisterInfo,
    RegisterRequest,
    ServiceInvoke,
    ServiceReply,
    ServiceReplyMode,
)
from .core.request_id import RequestIdGenerator

__version__ = "0.1.0"
