"""
Structural (de)serialization of dataclass instances.

The generated codec only needs two operations: turn an instance into its full
field map and rebuild an instance from a field map. `DataclassSerializer`
provides both for plain dataclasses; any object implementing the
`StructuralSerializer` protocol can be passed to `@query_params` instead.
"""

from __future__ import annotations

import dataclasses
import weakref
from collections.abc import Mapping
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from types import UnionType
from typing import (
	Annotated,
	Any,
	Protocol,
	TypeVar,
	get_args,
	get_origin,
	get_type_hints,
	runtime_checkable,
)

from darkroute.errors import ConstructionError

T = TypeVar("T")


@runtime_checkable
class StructuralSerializer(Protocol):
	def to_json(self, obj: Any) -> dict[str, Any]: ...

	def from_json(self, cls: type[T], data: Mapping[str, Any]) -> T: ...


def _is_union_origin(origin: Any) -> bool:
	return origin is UnionType or (
		getattr(origin, "__module__", "") == "typing"
		and getattr(origin, "__qualname__", "") == "Union"
	)


def _serialize_datetime(value: datetime) -> str:
	result = value.isoformat()
	if value.utcoffset() == timedelta(0) and result.endswith("+00:00"):
		return result[:-6] + "Z"
	return result


def to_json_value(value: Any) -> Any:
	"""Convert a field value into JSON-compatible data."""
	if value is None or isinstance(value, (str, bool, int, float)):
		return value
	if isinstance(value, Enum):
		return to_json_value(value.value)
	if isinstance(value, datetime):
		return _serialize_datetime(value)
	if isinstance(value, date):
		return value.isoformat()
	if dataclasses.is_dataclass(value) and not isinstance(value, type):
		return {
			f.name: to_json_value(getattr(value, f.name))
			for f in dataclasses.fields(value)
		}
	if isinstance(value, Mapping):
		return {str(k): to_json_value(v) for k, v in value.items()}
	if isinstance(value, (list, tuple, set, frozenset)):
		return [to_json_value(v) for v in value]
	return value


def _parse_bool(raw: str, *, param: str) -> bool:
	normalized = raw.strip().lower()
	if normalized in ("true", "1"):
		return True
	if normalized in ("false", "0"):
		return False
	raise ValueError(f"Field '{param}' expected bool, got '{raw}'")


def _parse_datetime(raw: str, *, param: str) -> datetime:
	value = raw
	if value.endswith("Z") or value.endswith("z"):
		value = value[:-1] + "+00:00"
	try:
		parsed = datetime.fromisoformat(value)
	except ValueError as exc:
		raise ValueError(
			f"Field '{param}' expected datetime (ISO 8601), got '{raw}'"
		) from exc
	if parsed.tzinfo is None:
		return parsed.replace(tzinfo=timezone.utc)
	return parsed


def _parse_date(raw: str, *, param: str) -> date:
	try:
		return date.fromisoformat(raw)
	except ValueError as exc:
		raise ValueError(
			f"Field '{param}' expected date (YYYY-MM-DD), got '{raw}'"
		) from exc


def from_json_value(value: Any, tp: Any, *, param: str) -> Any:
	"""Coerce JSON-compatible data (or query text) back to the annotated type."""
	origin = get_origin(tp)
	if origin is Annotated:
		return from_json_value(value, get_args(tp)[0], param=param)
	if value is None or tp is Any:
		return value
	if _is_union_origin(origin):
		members = [arg for arg in get_args(tp) if arg is not type(None)]
		if len(members) == 1:
			return from_json_value(value, members[0], param=param)
		return value
	if tp is str:
		return value if isinstance(value, str) else str(value)
	if tp is bool:
		if isinstance(value, bool):
			return value
		return _parse_bool(str(value), param=param)
	if tp is int:
		if isinstance(value, int) and not isinstance(value, bool):
			return value
		if isinstance(value, float) and value.is_integer():
			return int(value)
		try:
			return int(value)
		except (TypeError, ValueError) as exc:
			raise ValueError(f"Field '{param}' expected int, got {value!r}") from exc
	if tp is float:
		try:
			return float(value)
		except (TypeError, ValueError) as exc:
			raise ValueError(f"Field '{param}' expected float, got {value!r}") from exc
	if tp is datetime:
		if isinstance(value, datetime):
			return value
		return _parse_datetime(str(value), param=param)
	if tp is date:
		if isinstance(value, date):
			return value
		return _parse_date(str(value), param=param)
	if isinstance(tp, type) and issubclass(tp, Enum):
		return tp(value)
	if isinstance(tp, type) and dataclasses.is_dataclass(tp):
		if isinstance(value, tp):
			return value
		if not isinstance(value, Mapping):
			raise ValueError(
				f"Field '{param}' expected an object for {tp.__name__}, got {value!r}"
			)
		return DataclassSerializer().from_json(tp, value)
	if origin in (list, tuple, set, frozenset):
		args = get_args(tp)
		if origin is tuple and not (len(args) == 2 and args[1] is Ellipsis):
			items = [
				from_json_value(v, t, param=param)
				for v, t in zip(value, args, strict=False)
			]
		else:
			item_type = args[0] if args else Any
			items = [from_json_value(v, item_type, param=param) for v in value]
		return origin(items)
	if origin is dict:
		args = get_args(tp)
		key_type, value_type = args if len(args) == 2 else (Any, Any)
		return {
			from_json_value(k, key_type, param=param): from_json_value(
				v, value_type, param=param
			)
			for k, v in value.items()
		}
	return value


_FIELD_TYPES: weakref.WeakKeyDictionary[type, dict[str, Any]] = (
	weakref.WeakKeyDictionary()
)


def _field_types(cls: type) -> dict[str, Any]:
	types = _FIELD_TYPES.get(cls)
	if types is None:
		types = get_type_hints(cls, include_extras=True)
		_FIELD_TYPES[cls] = types
	return types


class DataclassSerializer:
	"""Field-by-field conversion between dataclass instances and dicts.

	`from_json` ignores unknown keys and leaves fields that are absent from the
	map at their defaults. A missing required field, or a value that cannot be
	coerced to its annotation, raises `ConstructionError`.
	"""

	def to_json(self, obj: Any) -> dict[str, Any]:
		return {
			f.name: to_json_value(getattr(obj, f.name))
			for f in dataclasses.fields(obj)
		}

	def from_json(self, cls: type[T], data: Mapping[str, Any]) -> T:
		types = _field_types(cls)
		kwargs: dict[str, Any] = {}
		for f in dataclasses.fields(cls):  # pyright: ignore[reportArgumentType]
			if not f.init:
				continue
			if f.name not in data:
				if (
					f.default is dataclasses.MISSING
					and f.default_factory is dataclasses.MISSING
				):
					raise ConstructionError(
						f"Missing required field '{f.name}' for {cls.__name__}",
						type_name=cls.__name__,
						field=f.name,
					)
				continue
			try:
				kwargs[f.name] = from_json_value(
					data[f.name], types.get(f.name, Any), param=f.name
				)
			except (TypeError, ValueError) as exc:
				raise ConstructionError(
					str(exc), type_name=cls.__name__, field=f.name
				) from exc
		return cls(**kwargs)


__all__ = [
	"DataclassSerializer",
	"StructuralSerializer",
	"from_json_value",
	"to_json_value",
]
