"""
Helpers moving query-params types in and out of URLs.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from darkroute.declare import get_query_params_info

T = TypeVar("T")


def parse_query_string(query: str) -> dict[str, str]:
	"""Parse a query string into a flat mapping. Repeated keys: last one wins."""
	return dict(parse_qsl(query.lstrip("?"), keep_blank_values=True))


def build_location(
	path: str, params: Any, *, extra: Mapping[str, str] | None = None
) -> str:
	"""Build `path?query` from a query-params instance.

	Query parameters already present in `path` and `extra` entries are kept,
	except for the keys owned by the type, which always come from `params`.
	"""
	info = get_query_params_info(type(params))
	parts = urlsplit(path)
	query = parse_query_string(parts.query)
	if extra:
		query.update(extra)
	for key in info.classification.simple_keys:
		query.pop(key, None)
	query.update(params.to_query_parameters())
	return urlunsplit(
		(parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment)
	)


def parse_location(url: str, cls: type[T]) -> T:
	"""Rebuild a query-params instance from the query string of `url`."""
	get_query_params_info(cls)
	query = parse_query_string(urlsplit(url).query)
	return cls.from_query_parameters(query)  # type: ignore[attr-defined]


__all__ = ["build_location", "parse_location", "parse_query_string"]
