#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
topic.py - positional access to MQTT topic segments

Downlink topics never tell which pattern produced them, so dynamic values
(device name, product key) are recovered by counting "/" delimiters.

Typical usage:
    >>> topic_level("/v1/device/down/set/devA", 5)
    'devA'
    >>> topic_level("/v1/device/down/set/devA", 6)
    ''
"""

from __future__ import annotations

from typing import Union

from .errors import TopicStructureError


def topic_level(topic: Union[str, bytes], level: int) -> str:
    """Return the segment between the level-th and (level+1)-th "/"

    Args:
        topic: topic string as received from the transport
        level: 1-based segment index

    Returns:
        The segment text. End of string closes the last segment, and the
        level right after it is the empty remainder.

    Raises:
        TopicStructureError: the topic is too short for ``level``
    """
    if isinstance(topic, (bytes, bytearray)):
        topic = topic.decode("utf-8", errors="replace")
    if level < 1:
        raise TopicStructureError("Topic level must be >= 1, got %r" % level)

    segments = topic.split("/")
    if level < len(segments):
        return segments[level]
    if level == len(segments):
        return ""
    raise TopicStructureError("Topic %r has no level %d" % (topic, level))
