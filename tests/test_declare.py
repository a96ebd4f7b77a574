from __future__ import annotations

import sys
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Annotated, Any

import pytest
from darkroute import (
	CallbackIdField,
	CallbackRegistry,
	ConfigurationError,
	DataclassSerializer,
	EncodeValueField,
	NoPayload,
	QueryParamsInfo,
	declared_types,
	get_query_params_info,
	is_query_params,
	query_params,
)


@query_params
@dataclass
class Declared(NoPayload):
	id: str | None = None
	cb: Annotated[str | None, CallbackIdField()] = None


@dataclass
class NotDeclared:
	id: str | None = None


def test_attaches_generated_methods():
	assert callable(Declared.to_query_parameters)
	assert callable(Declared.from_query_parameters)
	assert callable(Declared.set_callback)
	assert callable(Declared.execute_callback)
	assert isinstance(Declared.__dict__["has_callback"], property)
	assert isinstance(Declared.__dict__["from_query_parameters"], classmethod)


def test_generated_functions_look_like_methods():
	assert Declared.to_query_parameters.__qualname__ == "Declared.to_query_parameters"
	assert Declared.to_query_parameters.__module__ == __name__


def test_no_callback_section_without_callback_field():
	@query_params
	@dataclass
	class Plain(NoPayload):
		id: str | None = None

	assert not hasattr(Plain, "set_callback")
	assert not hasattr(Plain, "has_callback")
	assert get_query_params_info(Plain).registry is None


def test_info():
	info = get_query_params_info(Declared)
	assert isinstance(info, QueryParamsInfo)
	assert info.cls is Declared
	assert info.type_name == "Declared"
	assert info.classification.callback_field == "cb"
	assert isinstance(info.serializer, DataclassSerializer)
	assert info.registry is not None and info.registry.field == "cb"
	assert "def to_query_parameters" in info.source


def test_is_query_params():
	assert is_query_params(Declared)
	assert not is_query_params(NotDeclared)
	assert not is_query_params(Declared(id="1"))

	class Sub(Declared):
		pass

	# Subclasses inherit the methods but are not declared themselves
	assert not is_query_params(Sub)


def test_get_info_of_undeclared_type():
	with pytest.raises(ConfigurationError, match="not declared"):
		get_query_params_info(NotDeclared)


def test_declared_types_of_module():
	found = declared_types(sys.modules[__name__])
	assert Declared in found
	assert NotDeclared not in found


def test_rejects_non_classes():
	with pytest.raises(ConfigurationError, match="only be used on classes"):
		query_params(lambda: None)  # pyright: ignore[reportArgumentType]


def test_rejects_non_dataclasses():
	with pytest.raises(ConfigurationError, match="dataclasses"):

		@query_params
		class Plain(NoPayload):
			id: str | None = None


def test_rejects_non_text_encoded_field():
	with pytest.raises(ConfigurationError) as exc_info:

		@query_params
		@dataclass
		class Bad(NoPayload):
			ed: Annotated[int | None, EncodeValueField()] = None

	assert exc_info.value.field == "ed"
	assert exc_info.value.type_name == "Bad"


def test_requires_decoder():
	with pytest.raises(ConfigurationError, match="decode_payload"):

		@query_params
		@dataclass
		class NoCodecs:
			id: str | None = None


def test_requires_encoder_with_encoded_field():
	with pytest.raises(ConfigurationError, match="encode_payload"):

		@query_params(decode_payload=lambda raw: None)
		@dataclass
		class OnlyDecoder:
			ed: str | None = None
			count: int = 0


def test_explicit_codecs():
	def encode(payload: Mapping[str, Any]) -> str | None:
		return f"count:{payload['count']}"

	def decode(raw: str | None) -> Mapping[str, Any] | None:
		if raw is None:
			return None
		return {"count": int(raw.split(":")[1])}

	@query_params(encode_payload=encode, decode_payload=decode)
	@dataclass
	class Counter:
		ed: str | None = None
		count: int = 0

	assert Counter(count=3).to_query_parameters() == {"ed": "count:3"}
	assert Counter.from_query_parameters({"ed": "count:5"}) == Counter(count=5)


def test_frozen_types_cannot_hold_callbacks():
	with pytest.raises(ConfigurationError, match="frozen"):

		@query_params
		@dataclass(frozen=True)
		class Frozen(NoPayload):
			cb: Annotated[str | None, CallbackIdField()] = None


def test_frozen_types_without_callbacks():
	@query_params
	@dataclass(frozen=True)
	class Frozen(NoPayload):
		id: str | None = None

	assert Frozen.from_query_parameters({"id": "1"}) == Frozen(id="1")


def test_refuses_to_overwrite_methods():
	with pytest.raises(ConfigurationError, match="to_query_parameters"):

		@query_params
		@dataclass
		class Custom(NoPayload):
			id: str | None = None

			def to_query_parameters(self) -> dict[str, str]:
				return {}


def test_custom_registry():
	registry = CallbackRegistry("Shared", "cb")

	@query_params(registry=registry)
	@dataclass
	class WithRegistry(NoPayload):
		cb: Annotated[str | None, CallbackIdField()] = None

	params = WithRegistry().set_callback(lambda: None)
	assert params.cb in registry


def test_registry_field_mismatch():
	with pytest.raises(ConfigurationError, match="cannot serve"):

		@query_params(registry=CallbackRegistry("Other", "callback"))
		@dataclass
		class Mismatch(NoPayload):
			cb: Annotated[str | None, CallbackIdField()] = None


def test_registry_without_callback_field():
	with pytest.raises(ConfigurationError, match="no callback id field"):

		@query_params(registry=CallbackRegistry("Other", "cb"))
		@dataclass
		class NoCallback(NoPayload):
			id: str | None = None


def test_reset_registry():
	info = get_query_params_info(Declared)
	before = info.registry
	Declared().set_callback(lambda: None)

	after = info.reset_registry()

	assert after is not before
	assert after is not None and len(after) == 0
	assert Declared().set_callback(lambda: None).cb == "1"


def test_custom_serializer():
	class UpperSerializer(DataclassSerializer):
		def to_json(self, obj: Any) -> dict[str, Any]:
			data = super().to_json(obj)
			return {k: v.upper() if isinstance(v, str) else v for k, v in data.items()}

	@query_params(serializer=UpperSerializer())
	@dataclass
	class Shout(NoPayload):
		word: str | None = None

	assert Shout(word="hi").to_query_parameters() == {"word": "HI"}
