"""
Payload encoders for the encoded carrier field.

A declared type provides `encode_payload(payload) -> str | None` and
`decode_payload(raw) -> Mapping | None`, usually as static methods. The
mixins below cover the two common cases: no payload at all, and the
non-text fields packed as URL-safe base64 JSON.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)


def encode_json_base64(payload: Mapping[str, Any]) -> str | None:
	"""Encode `payload` as unpadded URL-safe base64 JSON.

	Returns None only for an empty payload. A payload of Nones is still encoded
	so that explicit Nones survive a round trip over non-None defaults.
	"""
	if not payload:
		return None
	raw = json.dumps(dict(payload), separators=(",", ":"), sort_keys=True)
	return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii").rstrip("=")


def decode_json_base64(raw: str | None) -> dict[str, Any] | None:
	"""Decode a value produced by `encode_json_base64`.

	Missing or malformed carriers decode to None, the same as an empty payload.
	"""
	if not raw:
		return None
	padded = raw + "=" * (-len(raw) % 4)
	try:
		decoded = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")))
	except (binascii.Error, UnicodeError, ValueError) as exc:
		logger.warning("Ignoring malformed encoded payload %r: %s", raw, exc)
		return None
	if not isinstance(decoded, dict):
		logger.warning("Ignoring encoded payload %r: expected a JSON object", raw)
		return None
	return decoded


class NoPayload:
	"""Payload codecs for types that carry everything as simple keys."""

	@staticmethod
	def encode_payload(payload: Mapping[str, Any]) -> str | None:
		return None

	@staticmethod
	def decode_payload(raw: str | None) -> Mapping[str, Any] | None:
		return None


class Base64JsonPayload:
	"""Payload codecs packing the non-text fields as base64 JSON."""

	@staticmethod
	def encode_payload(payload: Mapping[str, Any]) -> str | None:
		return encode_json_base64(payload)

	@staticmethod
	def decode_payload(raw: str | None) -> Mapping[str, Any] | None:
		return decode_json_base64(raw)


__all__ = [
	"Base64JsonPayload",
	"NoPayload",
	"decode_json_base64",
	"encode_json_base64",
]
