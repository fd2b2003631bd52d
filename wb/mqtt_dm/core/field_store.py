#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import json
import re
from json.decoder import scanstring
from typing import Dict, Protocol, Union

from .errors import FieldMalformedError, FieldMissingError

Payload = Union[bytes, bytearray, str]

_WS = re.compile(r"[ \t\n\r]*")
_decoder = json.JSONDecoder()


class FieldStore(Protocol):
    def lookup(self, payload: Payload, key: str) -> str:
        """Return the textual value stored under ``key``."""


class JsonFieldStore:
    """
    Field reader over JSON object payloads

    Values come back as text:
      - JSON strings are returned without quotes
      - everything else (numbers, objects, arrays, bools) is returned as the
        exact span the peer sent, e.g. {"v": 1e2} -> '1e2'

    Raises FieldMissingError for an absent key and FieldMalformedError
    when the payload is not a JSON object.
    """

    def lookup(self, payload: Payload, key: str) -> str:
        fields = self._parse(payload)
        if key not in fields:
            raise FieldMissingError("Field %r not found" % key)
        return fields[key]

    @staticmethod
    def _parse(payload: Payload) -> Dict[str, str]:
        if isinstance(payload, (bytes, bytearray)):
            try:
                payload = bytes(payload).decode("utf-8")
            except UnicodeDecodeError as e:
                raise FieldMalformedError("Payload is not UTF-8: %r" % e) from e
        try:
            return _top_level_fields(payload)
        except ValueError as e:
            raise FieldMalformedError("Payload is not a JSON object: %r" % e) from e


def _skip_ws(text: str, idx: int) -> int:
    return _WS.match(text, idx).end()


def _top_level_fields(text: str) -> Dict[str, str]:
    """Map each top-level key to its value text (later duplicates win)"""
    fields: Dict[str, str] = {}
    idx = _skip_ws(text, 0)
    if text[idx:idx + 1] != "{":
        raise ValueError("expected '{' at %d" % idx)
    idx = _skip_ws(text, idx + 1)
    if text[idx:idx + 1] == "}":
        idx += 1
    else:
        while True:
            if text[idx:idx + 1] != '"':
                raise ValueError("expected key at %d" % idx)
            key, idx = scanstring(text, idx + 1)
            idx = _skip_ws(text, idx)
            if text[idx:idx + 1] != ":":
                raise ValueError("expected ':' at %d" % idx)
            start = _skip_ws(text, idx + 1)
            value, end = _decoder.raw_decode(text, start)
            fields[key] = value if isinstance(value, str) else text[start:end]
            idx = _skip_ws(text, end)
            sep = text[idx:idx + 1]
            idx += 1
            if sep == "}":
                break
            if sep != ",":
                raise ValueError("expected ',' or '}' at %d" % (idx - 1))
            idx = _skip_ws(text, idx)
    if _skip_ws(text, idx) != len(text):
        raise ValueError("extra data at %d" % idx)
    return fields


def str_to_uint(value: str) -> int:
    """Convert a decimal text field (id, status code) to int"""
    s = value.strip()
    if not (s.isascii() and s.isdigit()):
        raise FieldMalformedError("Not an unsigned integer: %r" % value)
    return int(s)
