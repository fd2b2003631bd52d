#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Publish/subscribe transports

Each transport implementation is placed into its own package under:

  wb.mqtt_dm.transport.<name>/

Example:
  - mqtt  (paho-mqtt client connected to a broker)
"""

from .base import MessageHandler, ProcessHandler, Transport, TransportEvent

__all__ = ["MessageHandler", "ProcessHandler", "Transport", "TransportEvent"]
