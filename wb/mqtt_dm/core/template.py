#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

from typing import Sequence

from .errors import RenderError

SLOT = "%s"


def slot_count(template: str) -> int:
    return template.count(SLOT)


def render(template: str, values: Sequence[str]) -> str:
    """
    Substitute ordered string values into a fixed template

    Used for both topics (slot = device name) and payloads (slots = id,
    timestamp, parameters, etc). Values are inserted verbatim, no escaping.

    Example:
        render("/v1/device/up/event/%s", ["devA"]) -> "/v1/device/up/event/devA"
    """
    expected = slot_count(template)
    if len(values) != expected:
        raise RenderError(
            "Template %r expects %d values, got %d" % (template, expected, len(values))
        )
    for v in values:
        if not isinstance(v, str):
            raise RenderError("Template value must be str, got %r" % (v,))
    # Plain split/join so that "%" inside values and templates stays literal
    parts = template.split(SLOT)
    out = [parts[0]]
    for value, tail in zip(values, parts[1:]):
        out.append(value)
        out.append(tail)
    return "".join(out)
