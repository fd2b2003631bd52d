#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from wb.mqtt_dm.core.data_model import DataModel, DmOption
from wb.mqtt_dm.core.errors import TransportError, TransportUnavailableError
from wb.mqtt_dm.core.models import PropertyPost, ServiceInvoke
from wb.mqtt_dm.core.request_id import RequestIdGenerator
from wb.mqtt_dm.transport.base import TransportEvent
from wb.mqtt_dm.transport.mqtt.adapter import MqttConnectionConfig, MqttTransport


def _paho_client(rc: int = 0) -> MagicMock:
    client = MagicMock()
    client.publish.return_value = MagicMock(rc=rc)
    return client


def _fake_msg(topic: str, payload: bytes) -> MagicMock:
    msg = MagicMock()
    msg.topic = topic
    msg.payload = payload
    return msg


def test_start_connects_and_subscribes_registered_patterns():
    paho_client = _paho_client()
    cfg = MqttConnectionConfig(host="broker", port=1884, keepalive=30, device_name="devA")
    transport = MqttTransport(cfg=cfg, client=paho_client)

    transport.register_pattern("/v1/device/down/set/devA", lambda t, p: None)
    transport.start()

    paho_client.connect.assert_called_once_with("broker", 1884, keepalive=30)
    paho_client.subscribe.assert_any_call("/v1/device/down/set/devA", qos=0)
    paho_client.loop_start.assert_called_once()


def test_auth_is_configured():
    paho_client = _paho_client()
    MqttTransport(cfg=MqttConnectionConfig(host="h", username="u", password="p"), client=paho_client)
    paho_client.username_pw_set.assert_called_once_with("u", "p")


def test_register_after_start_subscribes_and_deregister_unsubscribes():
    paho_client = _paho_client()
    transport = MqttTransport(cfg=MqttConnectionConfig(host="h"), client=paho_client)
    transport.start()

    transport.register_pattern("a/b", lambda t, p: None)
    paho_client.subscribe.assert_called_with("a/b", qos=0)

    transport.deregister_pattern("a/b")
    paho_client.unsubscribe.assert_called_once_with("a/b")
    assert transport.patterns == []

    # Unknown pattern is ignored
    transport.deregister_pattern("a/b")
    paho_client.unsubscribe.assert_called_once()


def test_on_message_dispatches_by_pattern():
    paho_client = _paho_client()
    transport = MqttTransport(cfg=MqttConnectionConfig(host="h"), client=paho_client)

    got = []
    transport.register_pattern("/v1/device/down/set/devA", lambda t, p: got.append(("set", t, p)))
    transport.register_pattern("/v1/device/down/+/devB", lambda t, p: got.append(("wild", t, p)))

    transport._on_message(paho_client, None, _fake_msg("/v1/device/down/set/devA", b"{}"))
    transport._on_message(paho_client, None, _fake_msg("/v1/device/down/service/devB", b"1"))
    transport._on_message(paho_client, None, _fake_msg("/v1/device/down/set/devC", b"2"))

    assert got == [
        ("set", "/v1/device/down/set/devA", b"{}"),
        ("wild", "/v1/device/down/service/devB", b"1"),
    ]


def test_on_connect_resubscribes():
    paho_client = _paho_client()
    transport = MqttTransport(cfg=MqttConnectionConfig(host="h"), client=paho_client)
    transport.register_pattern("x/y", lambda t, p: None)

    transport._on_connect(paho_client, None, {}, 0, None)

    paho_client.subscribe.assert_called_once_with("x/y", qos=0)
    assert transport.wait_connected(0)


@pytest.mark.parametrize("rc", [0, 4])
def test_publish_returns_paho_rc(rc: int):
    paho_client = _paho_client(rc)
    transport = MqttTransport(cfg=MqttConnectionConfig(host="h"), client=paho_client)

    assert transport.publish("t", "payload", 0) == rc
    paho_client.publish.assert_called_once_with("t", payload=b"payload", qos=0)


def _attached(paho_client: MagicMock):
    transport = MqttTransport(cfg=MqttConnectionConfig(host="h", device_name="devA"), client=paho_client)
    dm = DataModel(id_generator=RequestIdGenerator())
    received = []
    dm.setopt(DmOption.RECV_HANDLER, lambda dm, recv, userdata: received.append(recv))
    dm.setopt(DmOption.MQTT_HANDLE, transport)
    transport.start()
    return transport, dm, received


def test_data_model_over_mqtt_send_and_receive():
    paho_client = _paho_client()
    transport, dm, received = _attached(paho_client)

    assert dm.send(PropertyPost(params='{"t":1}')) == 1
    paho_client.publish.assert_called_once_with(
        "/v1/device/up/datas/devA", payload=b'{"id":"1","devices":[{"t":1}]}', qos=0
    )

    transport._on_message(
        paho_client,
        None,
        _fake_msg("/v1/device/down/service/devA", b'{"id":"8","identifier":"reboot","data":{}}'),
    )
    assert received == [ServiceInvoke(device_name="devA", msg_id=8, identifier="reboot", params="{}")]


def test_data_model_over_mqtt_publish_failure():
    paho_client = _paho_client(rc=4)
    _, dm, _ = _attached(paho_client)

    with pytest.raises(TransportError) as exc:
        dm.send(PropertyPost(params="{}"))
    assert exc.value.code == 4


def test_stop_releases_data_model_handle():
    paho_client = _paho_client()
    transport, dm, _ = _attached(paho_client)
    events = []
    transport.add_process_handler(events.append)

    transport.stop()

    assert events == [TransportEvent.DEINIT]
    paho_client.loop_stop.assert_called_once()
    paho_client.disconnect.assert_called_once()
    with pytest.raises(TransportUnavailableError):
        dm.send(PropertyPost(params="{}"))
