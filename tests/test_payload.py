import base64
import json
import logging

import pytest
from darkroute import Base64JsonPayload, NoPayload, decode_json_base64, encode_json_base64


def test_encode_is_unpadded_urlsafe_json():
	encoded = encode_json_base64({"b": 2, "a": [1, 2]})
	assert encoded is not None
	assert "=" not in encoded
	assert "+" not in encoded and "/" not in encoded
	padded = encoded + "=" * (-len(encoded) % 4)
	assert base64.urlsafe_b64decode(padded) == b'{"a":[1,2],"b":2}'


def test_encode_is_key_order_independent():
	assert encode_json_base64({"a": 1, "b": 2}) == encode_json_base64({"b": 2, "a": 1})


def test_encode_nothing():
	assert encode_json_base64({}) is None


def test_explicit_nones_are_encoded():
	encoded = encode_json_base64({"a": None, "b": None})
	assert encoded is not None
	assert decode_json_base64(encoded) == {"a": None, "b": None}


def test_falsy_values_are_still_encoded():
	encoded = encode_json_base64({"count": 0, "tags": []})
	assert decode_json_base64(encoded) == {"count": 0, "tags": []}


def test_decode_missing():
	assert decode_json_base64(None) is None
	assert decode_json_base64("") is None


def test_decode_malformed(caplog: pytest.LogCaptureFixture):
	with caplog.at_level(logging.WARNING, logger="darkroute.payload"):
		assert decode_json_base64("not base64!!") is None
	assert any("malformed" in rec.getMessage() for rec in caplog.records)


def test_decode_requires_an_object():
	# "W10" is "[]" and "e30" is "{}"
	assert decode_json_base64("W10") is None
	assert decode_json_base64("e30") == {}


def test_decode_accepts_padded_input():
	raw = base64.urlsafe_b64encode(json.dumps({"q": "ü"}).encode()).decode()
	assert decode_json_base64(raw) == {"q": "ü"}


def test_mixins():
	assert NoPayload.encode_payload({"count": 1}) is None
	assert NoPayload.decode_payload("anything") is None

	encoded = Base64JsonPayload.encode_payload({"count": 1})
	assert Base64JsonPayload.decode_payload(encoded) == {"count": 1}
