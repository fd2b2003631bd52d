#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from wb.mqtt_dm.cli import main as cli
from wb.mqtt_dm.core.models import GenericReply, PropertyPost


def _write_config(tmp_path: Path, **extra) -> str:
    p = tmp_path / "wb-mqtt-dm.conf"
    p.write_text(json.dumps({"mqtt": {"host": "localhost"}, **extra}), encoding="utf-8")
    return str(p)


def test_no_command_prints_help(capsys):
    assert cli.main([]) == cli.ExitCode.INIT_ERROR
    assert "wb-mqtt-dm" in capsys.readouterr().out


def test_missing_config_is_init_error(tmp_path: Path):
    assert cli.send_one(str(tmp_path / "absent.conf"), PropertyPost(params="{}")) == cli.ExitCode.INIT_ERROR


def test_config_without_device_is_init_error(tmp_path: Path):
    assert cli.send_one(_write_config(tmp_path), PropertyPost(params="{}")) == cli.ExitCode.INIT_ERROR


def test_post_property_sends_through_mqtt(tmp_path: Path, monkeypatch, capsys):
    paho_client = MagicMock()
    paho_client.publish.return_value = MagicMock(rc=0)
    real_transport = cli.MqttTransport

    def make_transport(*, cfg):
        transport = real_transport(cfg=cfg, client=paho_client)
        transport.wait_connected = lambda timeout: True
        return transport

    monkeypatch.setattr(cli, "MqttTransport", make_transport)
    config = _write_config(tmp_path, device_name="devA")

    assert cli.main(["-c", config, "post-property", '{"t":1}']) == cli.ExitCode.GEN_SUCCESS

    topic = paho_client.publish.call_args.args[0]
    payload = paho_client.publish.call_args.kwargs["payload"]
    assert topic == "/v1/device/up/datas/devA"
    assert b'"devices":[{"t":1}]' in payload
    paho_client.disconnect.assert_called_once()
    assert capsys.readouterr().out.strip().isdigit()


def test_send_failure_exit_code(tmp_path: Path, monkeypatch):
    paho_client = MagicMock()
    paho_client.publish.return_value = MagicMock(rc=4)
    real_transport = cli.MqttTransport

    def make_transport(*, cfg):
        transport = real_transport(cfg=cfg, client=paho_client)
        transport.wait_connected = lambda timeout: True
        return transport

    monkeypatch.setattr(cli, "MqttTransport", make_transport)
    config = _write_config(tmp_path, device_name="devA")

    assert cli.send_one(config, PropertyPost(params="{}")) == cli.ExitCode.SEND_FAILED


def test_recv_to_json():
    recv = GenericReply(device_name="devA", product_key="device", msg_id=3, code=200, data="{}")
    assert json.loads(cli.recv_to_json(recv)) == {
        "type": "generic_reply",
        "device_name": "devA",
        "product_key": "device",
        "msg_id": 3,
        "code": 200,
        "data": "{}",
        "message": None,
    }


@pytest.mark.parametrize(
    "argv,command",
    [
        (["register"], "register"),
        (["post-event", "overheat", "{}", "--time", "17"], "post-event"),
        (["listen"], "listen"),
    ],
)
def test_parser_commands(argv, command):
    args = cli.build_parser().parse_args(argv)
    assert args.command == command
