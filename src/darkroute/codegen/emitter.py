from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from darkroute.classifier import Classification
from darkroute.codegen.templates.extension import (
	EXTENSION_TEMPLATE,
	MODULE_HEADER_TEMPLATE,
)

if TYPE_CHECKING:
	from darkroute.declare import QueryParamsInfo

CODEC_FUNCTIONS = ("to_query_parameters", "from_query_parameters")
CALLBACK_FUNCTIONS = ("set_callback", "execute_callback", "has_callback")


def generated_names(classification: Classification) -> tuple[str, ...]:
	if classification.has_callback:
		return CODEC_FUNCTIONS + CALLBACK_FUNCTIONS
	return CODEC_FUNCTIONS


def _frozenset_literal(keys: Sequence[str]) -> str:
	if not keys:
		return "frozenset()"
	return "frozenset({" + ", ".join(repr(k) for k in keys) + "})"


def render_extension(classification: Classification) -> str:
	"""Render the codec (and callback section) source for one declared type."""
	return str(
		EXTENSION_TEMPLATE.render_unicode(
			type_name=classification.type_name,
			simple_keys=classification.simple_keys,
			simple_keys_literal=_frozenset_literal(classification.simple_keys),
			encoded_field=classification.encoded_field,
			callback_field=classification.callback_field,
		)
	)


def render_module(info: "QueryParamsInfo") -> str:
	"""Render a standalone module exposing the generated functions of `info`."""
	header = str(
		MODULE_HEADER_TEMPLATE.render_unicode(
			module=info.cls.__module__,
			type_name=info.cls.__name__,
		)
	)
	return header + render_extension(info.classification)


def compile_extension(info: "QueryParamsInfo") -> dict[str, Callable[..., Any]]:
	"""Compile the rendered source and return the generated functions."""
	namespace: dict[str, Any] = {
		"_info": info,
		"Any": Any,
		"Callable": Callable,
		"Mapping": Mapping,
		"Sequence": Sequence,
	}
	code = compile(info.source, f"<query_params {info.type_name}>", "exec")
	exec(code, namespace)  # noqa: S102

	functions: dict[str, Callable[..., Any]] = {}
	for name in generated_names(info.classification):
		fn = namespace[name]
		fn.__qualname__ = f"{info.cls.__qualname__}.{name}"
		fn.__module__ = info.cls.__module__
		functions[name] = fn
	return functions


__all__ = [
	"CALLBACK_FUNCTIONS",
	"CODEC_FUNCTIONS",
	"compile_extension",
	"generated_names",
	"render_extension",
	"render_module",
]
