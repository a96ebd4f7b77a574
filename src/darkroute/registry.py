from __future__ import annotations

import inspect
import itertools
import logging
import threading
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from darkroute.errors import CallbackExecutionError, ErrorReporter

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CallbackRegistry:
	"""
	In-memory store of callbacks for one declared type.

	Each registration gets a new id (the next value of a counter, in hex) that
	is written to the instance's callback id field. Executing the callback
	consumes the entry: unknown or already executed ids are ignored.

	Registration and the lookup-and-remove step of `invoke` hold a lock, so
	the registry can be shared between threads and tasks. The callback itself
	runs outside of the lock.
	"""

	owner: str
	field: str
	reporter: ErrorReporter

	def __init__(
		self,
		owner: str,
		field: str,
		*,
		reporter: ErrorReporter | None = None,
	) -> None:
		self.owner = owner
		self.field = field
		self.reporter = reporter or ErrorReporter()
		self._entries: dict[str, Callable[..., Any]] = {}
		self._seed = itertools.count(1)
		self._lock = threading.Lock()

	def __len__(self) -> int:
		return len(self._entries)

	def __contains__(self, callback_id: object) -> bool:
		return callback_id in self._entries

	def __repr__(self) -> str:
		return (
			f"CallbackRegistry(owner={self.owner!r}, field={self.field!r}, "
			+ f"pending={len(self._entries)})"
		)

	def _next_id(self) -> str:
		return format(next(self._seed), "x")

	def register(self, instance: T, fn: Callable[..., Any]) -> T:
		"""Store `fn` and write its id to the instance. Returns the instance."""
		if not callable(fn):
			raise TypeError(f"Expected a callable, got {type(fn)!r}")
		with self._lock:
			callback_id = self._next_id()
			self._entries[callback_id] = fn
		setattr(instance, self.field, callback_id)
		logger.debug(
			"Registered callback %s on %s.%s", callback_id, self.owner, self.field
		)
		return instance

	def _take(self, callback_id: str) -> Callable[..., Any] | None:
		with self._lock:
			return self._entries.pop(callback_id, None)

	async def invoke(self, instance: Any, args: Sequence[Any] | None = None) -> None:
		"""Run the callback referenced by the instance, then forget it.

		Errors raised by the callback are reported, never raised. The id field
		is cleared once the callback completes, whether it succeeded or not.
		"""
		callback_id: str | None = getattr(instance, self.field)
		if callback_id is None:
			return
		fn = self._take(callback_id)
		if fn is None:
			logger.debug("No pending callback %s on %s", callback_id, self.owner)
			return

		try:
			result = fn(*(args or ()))
			if inspect.isawaitable(result):
				await result
		except Exception as exc:
			error = CallbackExecutionError(
				callback_id, f"Error executing callback {callback_id}: {exc}"
			)
			error.__cause__ = exc
			self.reporter.report(
				error,
				code="callback",
				details={
					"type": self.owner,
					"field": self.field,
					"callback": repr(fn),
				},
			)
		finally:
			# A callback may have registered a new one on the same instance
			if getattr(instance, self.field) == callback_id:
				setattr(instance, self.field, None)

	def has_pending(self, instance: Any) -> bool:
		return getattr(instance, self.field) is not None

	def clear(self) -> None:
		with self._lock:
			self._entries.clear()


__all__ = ["CallbackRegistry"]
