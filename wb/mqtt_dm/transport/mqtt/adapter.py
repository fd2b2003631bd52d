#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import paho.mqtt.client as paho_mqtt

from ..base import MessageHandler, ProcessHandler, Transport, TransportEvent


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MqttConnectionConfig:
    """
    MQTT connection settings for paho-mqtt client

    device_name is the default device identity used for topics when an
    outbound message does not name a device itself
    """

    host: str
    port: int = 1883
    client_id: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    keepalive: int = 60
    device_name: Optional[str] = None


class MqttTransport(Transport):
    """
    MQTT transport using paho-mqtt

    Notes:
      - In tests we inject a mocked paho client via `client=...`
      - In production we create the client automatically
      - Received topics are matched against registered patterns with
        paho's own `topic_matches_sub`
    """

    def __init__(
        self,
        *,
        cfg: MqttConnectionConfig,
        client: Optional[Any] = None,
    ) -> None:
        self._cfg = cfg
        self._lock = threading.Lock()
        self._patterns: Dict[str, MessageHandler] = {}
        self._process_handlers: List[ProcessHandler] = []
        self._started = False
        self._connected = threading.Event()
        self._last_info: Optional[Any] = None

        if client is None:
            self._client = paho_mqtt.Client(
                callback_api_version=paho_mqtt.CallbackAPIVersion.VERSION2,
                client_id=cfg.client_id or "",
            )
        else:
            self._client = client

        # Configure auth if provided
        if cfg.username:
            self._client.username_pw_set(cfg.username, cfg.password)

        # Callbacks
        self._client.on_connect = self._on_connect
        self._client.on_message = self._on_message
        self._client.on_disconnect = self._on_disconnect

    @property
    def device_name(self) -> Optional[str]:
        return self._cfg.device_name

    @property
    def patterns(self) -> List[str]:
        with self._lock:
            return list(self._patterns)

    def start(self) -> None:
        logger.info(
            "Starting MQTT transport: host=%s port=%s patterns=%d",
            self._cfg.host,
            self._cfg.port,
            len(self._patterns),
        )
        self._client.connect(self._cfg.host, self._cfg.port, keepalive=self._cfg.keepalive)
        self._started = True

        # Subscribe immediately so that unit tests (mock client) can assert subscribe calls
        # without simulating a full broker connect cycle
        for pattern in self.patterns:
            self._client.subscribe(pattern, qos=0)

        # Start network loop in background thread
        self._client.loop_start()

    def stop(self) -> None:
        logger.info("Stopping MQTT transport")
        self._notify(TransportEvent.DEINIT)
        try:
            self._client.loop_stop()
        finally:
            try:
                self._client.disconnect()
            except Exception:
                logger.exception("MQTT disconnect failed")
            self._started = False

    def publish(self, topic: str, payload: bytes, qos: int = 0) -> int:
        if isinstance(payload, str):
            payload = payload.encode("utf-8")
        logger.debug("MQTT publish: topic=%s payload=%r", topic, payload)
        info = self._client.publish(topic, payload=payload, qos=qos)
        rc = info.rc
        if rc != paho_mqtt.MQTT_ERR_SUCCESS:
            logger.warning("MQTT publish to %r failed: rc=%r", topic, rc)
        else:
            self._last_info = info
        return rc

    def wait_connected(self, timeout: float) -> bool:
        return self._connected.wait(timeout)

    def wait_published(self, timeout: float) -> bool:
        """Wait until the last accepted publish is handed to the network"""
        info = self._last_info
        if info is None:
            return True
        try:
            info.wait_for_publish(timeout)
        except (ValueError, RuntimeError) as e:
            logger.warning("MQTT publish not completed: %r", e)
            return False
        return info.is_published()

    def register_pattern(self, pattern: str, handler: MessageHandler) -> None:
        with self._lock:
            self._patterns[pattern] = handler
        logger.debug("Pattern registered: %s", pattern)
        if self._started:
            self._client.subscribe(pattern, qos=0)

    def deregister_pattern(self, pattern: str) -> None:
        with self._lock:
            handler = self._patterns.pop(pattern, None)
        if handler is None:
            logger.debug("Pattern not registered: %s", pattern)
            return
        if self._started:
            self._client.unsubscribe(pattern)

    def add_process_handler(self, handler: ProcessHandler) -> None:
        with self._lock:
            if handler not in self._process_handlers:
                self._process_handlers.append(handler)

    def remove_process_handler(self, handler: ProcessHandler) -> None:
        with self._lock:
            if handler in self._process_handlers:
                self._process_handlers.remove(handler)

    def _notify(self, event: TransportEvent) -> None:
        with self._lock:
            handlers = list(self._process_handlers)
        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception("Process handler failed on %s", event)

    # ---- paho callbacks ----

    def _on_connect(self, client: Any, userdata: Any, flags: Any, reason_code: Any, properties: Any = None) -> None:
        logger.info("MQTT connected: rc=%s", reason_code)
        if getattr(reason_code, "is_failure", False):
            return
        self._connected.set()
        # Re-issue subscriptions, the broker may have dropped them
        for pattern in self.patterns:
            try:
                client.subscribe(pattern, qos=0)
            except Exception:
                logger.exception("MQTT subscribe failed: %s", pattern)

    def _on_disconnect(self, client: Any, userdata: Any, flags: Any, reason_code: Any, properties: Any = None) -> None:
        logger.warning("MQTT disconnected: rc=%s", reason_code)
        self._connected.clear()

    def _on_message(self, client: Any, userdata: Any, msg: Any) -> None:
        topic = str(getattr(msg, "topic", ""))
        payload = msg.payload
        with self._lock:
            handlers = [h for p, h in self._patterns.items() if paho_mqtt.topic_matches_sub(p, topic)]
        if not handlers:
            logger.debug("No handler for topic %r", topic)
            return
        for handler in handlers:
            try:
                handler(topic, payload)
            except Exception:
                logger.exception("Handler failed for topic %r", topic)
