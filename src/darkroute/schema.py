"""
Field descriptors for query-parameter types.

A `Schema` is an explicit, ordered description of the fields of one declared
type. It can be written by hand or derived from a dataclass, in which case
the carrier roles are read from `typing.Annotated` markers:

```python
@dataclass
class SearchParams:
    q: str | None = None
    page: int = 1
    ed: Annotated[str | None, EncodeValueField()] = None
    cb: Annotated[str | None, CallbackIdField()] = None
```
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from types import UnionType
from typing import (
	TYPE_CHECKING,
	Annotated,
	Any,
	Generic,
	TypeAlias,
	TypeVar,
	get_args,
	get_origin,
	get_type_hints,
)

from darkroute.errors import ConfigurationError

T = TypeVar("T")


class FieldKind(str, Enum):
	TEXT = "text"
	OTHER = "other"


class FieldRole(str, Enum):
	ENCODED_PAYLOAD = "encoded-payload-carrier"
	CALLBACK_ID = "callback-id-carrier"


@dataclass(frozen=True)
class EncodeValueField:
	"""Marks the `str | None` field that carries the encoded payload.

	The field is managed by the generated code: `to_query_parameters` always
	regenerates it and `from_query_parameters` never exposes it. Do not set or
	read it by hand.
	"""


@dataclass(frozen=True)
class CallbackIdField:
	"""Marks the `str | None` field that stores a registered callback id."""


if TYPE_CHECKING:
	EncodedPayload: TypeAlias = Annotated[T, EncodeValueField]
	CallbackId: TypeAlias = Annotated[T, CallbackIdField]
else:

	class EncodedPayload(Generic[T]):
		def __class_getitem__(cls, params: Any):
			return Annotated[params, EncodeValueField()]

	class CallbackId(Generic[T]):
		def __class_getitem__(cls, params: Any):
			return Annotated[params, CallbackIdField()]


@dataclass(frozen=True)
class FieldSpec:
	name: str
	kind: FieldKind = FieldKind.OTHER
	roles: frozenset[FieldRole] = frozenset()

	@property
	def is_text(self) -> bool:
		return self.kind is FieldKind.TEXT

	def has_role(self, role: FieldRole) -> bool:
		return role in self.roles

	@classmethod
	def text(cls, name: str, *roles: FieldRole) -> "FieldSpec":
		return cls(name, FieldKind.TEXT, frozenset(roles))

	@classmethod
	def other(cls, name: str, *roles: FieldRole) -> "FieldSpec":
		return cls(name, FieldKind.OTHER, frozenset(roles))


@dataclass(frozen=True)
class Schema:
	"""Ordered field descriptors of one declared type."""

	name: str
	fields: tuple[FieldSpec, ...] = field(default_factory=tuple)

	def __post_init__(self) -> None:
		seen: set[str] = set()
		for spec in self.fields:
			if spec.name in seen:
				raise ConfigurationError(
					f"Field '{spec.name}' is declared more than once on '{self.name}'",
					type_name=self.name,
					field=spec.name,
				)
			seen.add(spec.name)

	@classmethod
	def of(cls, name: str, fields: Iterable[FieldSpec]) -> "Schema":
		return cls(name, tuple(fields))

	def __iter__(self) -> Iterator[FieldSpec]:
		return iter(self.fields)

	def __len__(self) -> int:
		return len(self.fields)

	def get(self, name: str) -> FieldSpec | None:
		for spec in self.fields:
			if spec.name == name:
				return spec
		return None


def _is_union_origin(origin: Any) -> bool:
	return origin is UnionType or (
		getattr(origin, "__module__", "") == "typing"
		and getattr(origin, "__qualname__", "") == "Union"
	)


def _strip_annotated(tp: Any) -> tuple[Any, tuple[Any, ...]]:
	if get_origin(tp) is Annotated:
		base, *metadata = get_args(tp)
		return base, tuple(metadata)
	return tp, ()


def _roles_from_metadata(metadata: tuple[Any, ...]) -> frozenset[FieldRole]:
	roles: set[FieldRole] = set()
	for item in metadata:
		# Accept both `EncodeValueField()` and the bare class
		if isinstance(item, EncodeValueField) or item is EncodeValueField:
			roles.add(FieldRole.ENCODED_PAYLOAD)
		elif isinstance(item, CallbackIdField) or item is CallbackIdField:
			roles.add(FieldRole.CALLBACK_ID)
	return frozenset(roles)


def field_spec_from_annotation(name: str, annotation: Any) -> FieldSpec:
	base, metadata = _strip_annotated(annotation)
	if _is_union_origin(get_origin(base)):
		# `Annotated[str, ...] | None` keeps the marker one level down
		members: list[Any] = []
		for arg in get_args(base):
			arg_base, arg_meta = _strip_annotated(arg)
			metadata += arg_meta
			members.append(arg_base)
		is_text = len(members) == 2 and str in members and type(None) in members
	else:
		is_text = base is str
	kind = FieldKind.TEXT if is_text else FieldKind.OTHER
	return FieldSpec(name, kind, _roles_from_metadata(metadata))


def schema_from_dataclass(cls: type) -> Schema:
	"""Derive a `Schema` from a dataclass' fields and annotations."""
	if not isinstance(cls, type) or not dataclasses.is_dataclass(cls):
		raise ConfigurationError(
			"@query_params can only be used on dataclasses.",
			type_name=getattr(cls, "__name__", repr(cls)),
		)
	try:
		hints = get_type_hints(cls, include_extras=True)
	except NameError as exc:
		raise ConfigurationError(
			f"Could not resolve the annotations of '{cls.__name__}': {exc}",
			type_name=cls.__name__,
		) from exc

	specs: list[FieldSpec] = []
	for f in dataclasses.fields(cls):
		annotation = hints.get(f.name, f.type)
		specs.append(field_spec_from_annotation(f.name, annotation))
	return Schema(cls.__name__, tuple(specs))


__all__ = [
	"CallbackId",
	"CallbackIdField",
	"EncodeValueField",
	"EncodedPayload",
	"FieldKind",
	"FieldRole",
	"FieldSpec",
	"Schema",
	"field_spec_from_annotation",
	"schema_from_dataclass",
]
