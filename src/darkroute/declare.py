"""
The `@query_params` decorator.

Declaring a dataclass classifies its fields once, renders the codec source,
compiles it and attaches the generated methods to the class:

```python
@query_params
@dataclass
class ProductParams(Base64JsonPayload):
    id: str | None = None
    type: str | None = None
    count: int = 0
    ed: Annotated[str | None, EncodeValueField()] = None
    cb: Annotated[str | None, CallbackIdField()] = None

params = ProductParams(id="7", count=3)
query = params.to_query_parameters()  # {"id": "7", "ed": "..."}
ProductParams.from_query_parameters(query)
```
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import ModuleType
from typing import Any, TypeVar, overload

from darkroute.classifier import Classification, classify
from darkroute.codegen.emitter import (
	compile_extension,
	generated_names,
	render_extension,
)
from darkroute.errors import ConfigurationError, ErrorReporter
from darkroute.registry import CallbackRegistry
from darkroute.schema import Schema, schema_from_dataclass
from darkroute.serializer import DataclassSerializer, StructuralSerializer

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=type)

EncodePayload = Callable[[Mapping[str, Any]], "str | None"]
DecodePayload = Callable[["str | None"], "Mapping[str, Any] | None"]

INFO_ATTR = "__query_params__"


@dataclass
class QueryParamsInfo:
	"""Everything the generated methods of one declared type resolve at runtime."""

	cls: type
	schema: Schema
	classification: Classification
	serializer: StructuralSerializer
	decode_payload: DecodePayload
	encode_payload: EncodePayload | None = None
	registry: CallbackRegistry | None = None
	source: str = field(default="", repr=False)

	@property
	def type_name(self) -> str:
		return self.schema.name

	def reset_registry(self) -> CallbackRegistry | None:
		"""Replace the callback registry with an empty one and return it."""
		if self.classification.callback_field is None:
			return None
		reporter = self.registry.reporter if self.registry is not None else None
		self.registry = CallbackRegistry(
			self.type_name, self.classification.callback_field, reporter=reporter
		)
		return self.registry


def _resolve_payload_codec(cls: type, name: str, explicit: Any) -> Any:
	if explicit is not None:
		return explicit
	return getattr(cls, name, None)


def _check_callable(cls: type, name: str, value: Any) -> None:
	if value is None:
		raise ConfigurationError(
			f"'{cls.__name__}' must define a static `{name}` method or pass "
			+ f"`{name}=` to @query_params (see NoPayload and Base64JsonPayload)",
			type_name=cls.__name__,
		)
	if not callable(value):
		raise ConfigurationError(
			f"`{name}` on '{cls.__name__}' is not callable",
			type_name=cls.__name__,
		)


def _declare(
	cls: type,
	*,
	serializer: StructuralSerializer | None,
	encode_payload: EncodePayload | None,
	decode_payload: DecodePayload | None,
	registry: CallbackRegistry | None,
	reporter: ErrorReporter | None,
) -> type:
	schema = schema_from_dataclass(cls)
	classification = classify(schema)

	decoder = _resolve_payload_codec(cls, "decode_payload", decode_payload)
	_check_callable(cls, "decode_payload", decoder)
	encoder = _resolve_payload_codec(cls, "encode_payload", encode_payload)
	if classification.encoded_field is not None:
		_check_callable(cls, "encode_payload", encoder)

	for name in generated_names(classification):
		if name in cls.__dict__:
			raise ConfigurationError(
				f"'{cls.__name__}' already defines `{name}`, which "
				+ "@query_params generates",
				type_name=cls.__name__,
				field=name,
			)

	callback_field = classification.callback_field
	if callback_field is None:
		if registry is not None:
			raise ConfigurationError(
				f"'{cls.__name__}' has no callback id field, cannot use a registry",
				type_name=cls.__name__,
			)
	else:
		params = getattr(cls, "__dataclass_params__", None)
		if params is not None and params.frozen:
			raise ConfigurationError(
				f"'{cls.__name__}' is frozen, its callback id field "
				+ f"'{callback_field}' cannot be updated",
				type_name=cls.__name__,
				field=callback_field,
			)
		if registry is None:
			registry = CallbackRegistry(cls.__name__, callback_field, reporter=reporter)
		elif registry.field != callback_field:
			raise ConfigurationError(
				f"Registry for '{registry.owner}.{registry.field}' cannot serve "
				+ f"'{cls.__name__}.{callback_field}'",
				type_name=cls.__name__,
				field=callback_field,
			)

	info = QueryParamsInfo(
		cls=cls,
		schema=schema,
		classification=classification,
		serializer=serializer or DataclassSerializer(),
		decode_payload=decoder,
		encode_payload=encoder,
		registry=registry,
		source=render_extension(classification),
	)
	functions = compile_extension(info)

	cls.to_query_parameters = functions["to_query_parameters"]  # type: ignore[attr-defined]
	cls.from_query_parameters = classmethod(functions["from_query_parameters"])  # type: ignore[attr-defined]
	if callback_field is not None:
		cls.set_callback = functions["set_callback"]  # type: ignore[attr-defined]
		cls.execute_callback = functions["execute_callback"]  # type: ignore[attr-defined]
		cls.has_callback = property(functions["has_callback"])  # type: ignore[attr-defined]
	setattr(cls, INFO_ATTR, info)

	logger.debug(
		"Declared query params %s (simple=%s, encoded=%s, callback=%s)",
		cls.__name__,
		classification.simple_keys,
		classification.encoded_field,
		classification.callback_field,
	)
	return cls


@overload
def query_params(cls: T, /) -> T: ...
@overload
def query_params(
	*,
	serializer: StructuralSerializer | None = None,
	encode_payload: EncodePayload | None = None,
	decode_payload: DecodePayload | None = None,
	registry: CallbackRegistry | None = None,
	reporter: ErrorReporter | None = None,
) -> Callable[[T], T]: ...
def query_params(
	cls: Any = None,
	/,
	*,
	serializer: StructuralSerializer | None = None,
	encode_payload: EncodePayload | None = None,
	decode_payload: DecodePayload | None = None,
	registry: CallbackRegistry | None = None,
	reporter: ErrorReporter | None = None,
) -> Any:
	"""Generate query-parameter methods for a dataclass.

	Args:
	    serializer: Structural serializer, defaults to `DataclassSerializer`.
	    encode_payload: Payload encoder, defaults to the class' `encode_payload`.
	    decode_payload: Payload decoder, defaults to the class' `decode_payload`.
	    registry: Callback registry, defaults to a new one for this type.
	    reporter: Error sink of the default registry.

	Raises:
	    ConfigurationError: the class cannot be classified or wired up.
	"""

	def decorator(target: T) -> T:
		if not isinstance(target, type):
			raise ConfigurationError(
				"@query_params can only be used on classes.",
				type_name=getattr(target, "__name__", None),
			)
		return _declare(  # pyright: ignore[reportReturnType]
			target,
			serializer=serializer,
			encode_payload=encode_payload,
			decode_payload=decode_payload,
			registry=registry,
			reporter=reporter,
		)

	if cls is not None:
		return decorator(cls)
	return decorator


def is_query_params(obj: Any) -> bool:
	return isinstance(obj, type) and isinstance(
		obj.__dict__.get(INFO_ATTR), QueryParamsInfo
	)


def get_query_params_info(cls: type) -> QueryParamsInfo:
	info = cls.__dict__.get(INFO_ATTR)
	if not isinstance(info, QueryParamsInfo):
		raise ConfigurationError(
			f"'{cls.__name__}' is not declared with @query_params",
			type_name=cls.__name__,
		)
	return info


def declared_types(module: ModuleType) -> list[type]:
	"""Query-params types defined at the top level of `module`."""
	return [
		obj
		for obj in vars(module).values()
		if is_query_params(obj) and obj.__module__ == module.__name__
	]


__all__ = [
	"QueryParamsInfo",
	"declared_types",
	"get_query_params_info",
	"is_query_params",
	"query_params",
]
