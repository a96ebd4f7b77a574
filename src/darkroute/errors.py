from __future__ import annotations

import logging
import traceback
from typing import Any, Literal

logger = logging.getLogger(__name__)

ErrorCode = Literal[
	"callback",
	"codegen",
	"load",
]


class DarkrouteError(Exception):
	"""Base class for every error raised by darkroute."""


class ConfigurationError(DarkrouteError, TypeError):
	"""A declared type cannot be classified or wired up."""

	type_name: str | None
	field: str | None

	def __init__(
		self,
		message: str,
		*,
		type_name: str | None = None,
		field: str | None = None,
	) -> None:
		super().__init__(message)
		self.type_name = type_name
		self.field = field


class ConstructionError(DarkrouteError, TypeError):
	"""An instance could not be rebuilt from a field map."""

	type_name: str
	field: str | None

	def __init__(self, message: str, *, type_name: str, field: str | None = None):
		super().__init__(message)
		self.type_name = type_name
		self.field = field


class CallbackExecutionError(DarkrouteError):
	"""A registered callback raised while being executed.

	The original exception is available as ``__cause__``.
	"""

	callback_id: str

	def __init__(self, callback_id: str, message: str) -> None:
		super().__init__(message)
		self.callback_id = callback_id


def _format_stack(exc: BaseException) -> str:
	return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


class ErrorReporter:
	"""Diagnostic sink for errors that are reported instead of raised."""

	__slots__: tuple[str, ...] = ("_logger",)
	_logger: logging.Logger

	def __init__(self, log: logging.Logger | None = None) -> None:
		self._logger = log or logger

	def report(
		self,
		exc: BaseException,
		*,
		code: ErrorCode,
		details: dict[str, Any] | None = None,
		message: str | None = None,
	) -> None:
		payload_details = dict(details) if details is not None else {}
		# Report the root cause's stack when the error wraps another one
		cause = exc.__cause__ if exc.__cause__ is not None else exc
		stack = _format_stack(cause)
		payload_message = message or str(exc)

		self._logger.error(
			"Darkroute error code=%s message=%s details=%s\n%s",
			code,
			payload_message,
			payload_details,
			stack,
		)


__all__ = [
	"CallbackExecutionError",
	"ConfigurationError",
	"ConstructionError",
	"DarkrouteError",
	"ErrorCode",
	"ErrorReporter",
]
