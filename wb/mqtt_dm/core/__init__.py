#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Data-model core

Table-driven mapping between typed thing-model messages and
(topic, payload) pairs:

  - send.py   outbound table (MessageType -> topic template + encoder)
  - recv.py   inbound table (downlink pattern -> decoder)
  - topic.py  positional topic segment parser
"""
