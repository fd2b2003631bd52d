#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from ..transport.mqtt.adapter import MqttConnectionConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClientConfig:
    """
    Settings of the wb-mqtt-dm command line client.

    Example (input JSON):
        {
          "device_name": "devA",
          "post_reply": true,
          "mqtt": {"host": "localhost", "port": 1883}
        }
    """

    mqtt: MqttConnectionConfig
    post_reply: bool = True


def parse_config(raw: Dict[str, Any]) -> ClientConfig:
    if not isinstance(raw, dict):
        raise ValueError("Configuration root must be an object")
    mqtt = raw.get("mqtt") or {}
    if not isinstance(mqtt, dict):
        raise ValueError("'mqtt' section must be an object")

    device_name: Optional[str] = raw.get("device_name")
    if device_name is not None and not isinstance(device_name, str):
        raise ValueError("'device_name' must be a string")

    try:
        port = int(mqtt.get("port", 1883))
        keepalive = int(mqtt.get("keepalive", 60))
    except (TypeError, ValueError) as e:
        raise ValueError("Invalid MQTT port/keepalive: %r" % e) from e

    return ClientConfig(
        mqtt=MqttConnectionConfig(
            host=mqtt.get("host", "localhost"),
            port=port,
            client_id=mqtt.get("client_id"),
            username=mqtt.get("username"),
            password=mqtt.get("password"),
            keepalive=keepalive,
            device_name=device_name,
        ),
        post_reply=bool(raw.get("post_reply", True)),
    )


def load_client_config(path: str) -> ClientConfig:
    """Load client configuration file"""

    logger.debug("Reading client configuration file %r...", path)
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except Exception as e:
        logger.error("Error reading client configuration file: %r", e)
        raise ValueError("Cannot read configuration %r: %r" % (path, e)) from e
    return parse_config(raw)
