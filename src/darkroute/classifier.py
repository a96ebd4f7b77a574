from __future__ import annotations

import logging
from dataclasses import dataclass

from darkroute.errors import ConfigurationError
from darkroute.schema import FieldRole, FieldSpec, Schema

logger = logging.getLogger(__name__)

# Carrier name used when no field is explicitly tagged
DEFAULT_ENCODED_FIELD = "ed"


@dataclass(frozen=True)
class Classification:
	"""How the fields of one declared type travel through a query string.

	Attributes:
	    type_name: Name of the declared type.
	    simple_keys: Text fields carried verbatim, in declaration order.
	    encoded_field: Field carrying the encoded payload, if any.
	    callback_field: Field carrying a callback registry id, if any.
	"""

	type_name: str
	simple_keys: tuple[str, ...]
	encoded_field: str | None = None
	callback_field: str | None = None

	@property
	def has_callback(self) -> bool:
		return self.callback_field is not None


def _tagged(schema: Schema, role: FieldRole) -> list[FieldSpec]:
	return [spec for spec in schema if spec.has_role(role)]


def _resolve_encoded_field(schema: Schema) -> str | None:
	tagged = _tagged(schema, FieldRole.ENCODED_PAYLOAD)
	if len(tagged) > 1:
		names = ", ".join(f"'{spec.name}'" for spec in tagged)
		raise ConfigurationError(
			f"'{schema.name}' marks more than one encoded payload field: {names}",
			type_name=schema.name,
			field=tagged[1].name,
		)
	if tagged:
		spec = tagged[0]
		if not spec.is_text:
			raise ConfigurationError(
				f"Encoded payload field '{spec.name}' on '{schema.name}' must be a "
				+ "text field (str | None)",
				type_name=schema.name,
				field=spec.name,
			)
		return spec.name

	fallback = schema.get(DEFAULT_ENCODED_FIELD)
	if fallback is not None and fallback.is_text:
		return fallback.name
	return None


def _resolve_callback_field(schema: Schema) -> str | None:
	tagged = _tagged(schema, FieldRole.CALLBACK_ID)
	if not tagged:
		return None
	if len(tagged) > 1:
		logger.debug(
			"'%s' marks several callback id fields, using '%s'",
			schema.name,
			tagged[0].name,
		)
	spec = tagged[0]
	if not spec.is_text:
		raise ConfigurationError(
			f"Callback id field '{spec.name}' on '{schema.name}' must be a text "
			+ "field (str | None)",
			type_name=schema.name,
			field=spec.name,
		)
	return spec.name


def classify(schema: Schema) -> Classification:
	"""Partition the fields of `schema` into simple, encoded and callback roles.

	Raises `ConfigurationError` when a carrier field is not a text field.
	"""
	simple_keys = tuple(spec.name for spec in schema if spec.is_text)
	encoded_field = _resolve_encoded_field(schema)
	callback_field = _resolve_callback_field(schema)
	result = Classification(
		type_name=schema.name,
		simple_keys=simple_keys,
		encoded_field=encoded_field,
		callback_field=callback_field,
	)
	logger.debug("Classified %s: %r", schema.name, result)
	return result


__all__ = ["DEFAULT_ENCODED_FIELD", "Classification", "classify"]
