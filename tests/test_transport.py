from __future__ import annotations

from dataclasses import dataclass

import pytest
from darkroute import (
	Base64JsonPayload,
	ConfigurationError,
	NoPayload,
	build_location,
	parse_location,
	parse_query_string,
	query_params,
)


@query_params
@dataclass
class SearchParams(NoPayload):
	q: str | None = None
	lang: str | None = None


@query_params
@dataclass
class PagedParams(Base64JsonPayload):
	q: str | None = None
	ed: str | None = None
	page: int = 1


@dataclass
class Plain:
	q: str | None = None


class TestParseQueryString:
	def test_basic(self):
		assert parse_query_string("a=1&b=two") == {"a": "1", "b": "two"}

	def test_leading_question_mark(self):
		assert parse_query_string("?a=1") == {"a": "1"}

	def test_last_repeated_key_wins(self):
		assert parse_query_string("a=1&a=2") == {"a": "2"}

	def test_blank_values_are_kept(self):
		assert parse_query_string("a=&b=1") == {"a": "", "b": "1"}

	def test_decoding(self):
		assert parse_query_string("q=a+b%26c") == {"q": "a b&c"}


class TestBuildLocation:
	def test_simple(self):
		assert build_location("/search", SearchParams(q="a b")) == "/search?q=a+b"

	def test_keeps_unrelated_parameters(self):
		location = build_location("/s?page=x", SearchParams(q="a b"))
		assert location == "/s?page=x&q=a+b"

	def test_owned_keys_come_from_params(self):
		location = build_location("/s?q=old&lang=fr", SearchParams(q="new"))
		# `lang` is cleared because the instance has no value for it
		assert parse_query_string(location.split("?", 1)[1]) == {"q": "new"}

	def test_extra(self):
		location = build_location("/s", SearchParams(q="x"), extra={"ref": "nav"})
		assert location == "/s?ref=nav&q=x"

	def test_keeps_scheme_host_and_fragment(self):
		location = build_location("https://example.com/s#top", SearchParams(q="x"))
		assert location == "https://example.com/s?q=x#top"

	def test_no_parameters(self):
		assert build_location("/s", SearchParams()) == "/s"

	def test_requires_declared_type(self):
		with pytest.raises(ConfigurationError):
			build_location("/s", Plain(q="x"))


class TestParseLocation:
	def test_round_trip(self):
		params = PagedParams(q="shoes", page=4)
		location = build_location("/search", params)
		assert parse_location(location, PagedParams) == params

	def test_absolute_url(self):
		params = parse_location("https://example.com/s?q=x&utm=mail", SearchParams)
		assert params == SearchParams(q="x")

	def test_requires_declared_type(self):
		with pytest.raises(ConfigurationError):
			parse_location("/s?q=x", Plain)
