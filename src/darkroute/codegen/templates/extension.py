from mako.template import Template

# Mako template for the codec and the optional callback section.
# The rendered functions resolve the serializer, payload codecs and registry
# through `_info` at call time.
EXTENSION_TEMPLATE = Template(
	'''# GENERATED QUERY PARAMS EXTENSION - DO NOT MODIFY BY HAND
# ${type_name}

_SIMPLE_KEYS = ${simple_keys_literal}


def to_query_parameters(self) -> dict[str, str]:
	"""Convert this instance to URL query parameters."""
	full = _info.serializer.to_json(self)
% if encoded_field:

	# Payload = everything except the simple keys
	payload = {key: value for key, value in full.items() if key not in _SIMPLE_KEYS}
	encoded = _info.encode_payload(payload)
% endif

	result: dict[str, str] = {}
% for key in simple_keys:
% if key == encoded_field:
	if encoded is not None:
		result[${repr(key)}] = str(encoded)
% else:
	if full.get(${repr(key)}) is not None:
		result[${repr(key)}] = str(full[${repr(key)}])
% endif
% endfor
	return result


def from_query_parameters(cls, query: Mapping[str, str]):
	"""Create an instance from URL query parameters."""
	base: dict[str, Any] = dict(query)

% if encoded_field:
	payload = _info.decode_payload(base.get(${repr(encoded_field)}))
% else:
	payload = _info.decode_payload(None)
% endif
	if payload is not None:
		base.update(payload)
% if encoded_field:
	base.pop(${repr(encoded_field)}, None)
% endif

	return _info.serializer.from_json(cls, base)
% if callback_field:


# ---------------------------------------------------------------------------
# Callback registry for field `${callback_field}`
# ---------------------------------------------------------------------------


def set_callback(self, fn: Callable[..., Any]):
	"""Registers a callback function and saves its id into `${callback_field}`."""
	return _info.registry.register(self, fn)


async def execute_callback(self, args: Sequence[Any] | None = None) -> None:
	"""Executes the callback stored in `${callback_field}`, if any, and removes it."""
	await _info.registry.invoke(self, args)


def has_callback(self) -> bool:
	"""True if a callback id is present in `${callback_field}`."""
	return _info.registry.has_pending(self)
% endif
'''
)

# Header of a generated module written to disk
MODULE_HEADER_TEMPLATE = Template(
	"""# ruff: noqa
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from ${module} import ${type_name}

_info = ${type_name}.__query_params__

"""
)
