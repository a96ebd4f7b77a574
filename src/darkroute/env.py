"""
Environment-backed settings.

Values are read from `os.environ` on every access, so tests and the CLI can
change them at runtime through the setters.
"""

from __future__ import annotations

import os

ENV_DARKROUTE_OUTPUT_DIR = "DARKROUTE_OUTPUT_DIR"
ENV_DARKROUTE_LOG_LEVEL = "DARKROUTE_LOG_LEVEL"
ENV_DARKROUTE_DISABLE_CODEGEN = "DARKROUTE_DISABLE_CODEGEN"

_TRUTHY = ("1", "true", "yes", "on")


def _set_or_unset(name: str, value: str | None) -> None:
	if value is None:
		os.environ.pop(name, None)
	else:
		os.environ[name] = value


class DarkrouteEnv:
	@property
	def output_dir(self) -> str | None:
		return os.environ.get(ENV_DARKROUTE_OUTPUT_DIR) or None

	@output_dir.setter
	def output_dir(self, value: str | None) -> None:
		_set_or_unset(ENV_DARKROUTE_OUTPUT_DIR, value)

	@property
	def log_level(self) -> str:
		return os.environ.get(ENV_DARKROUTE_LOG_LEVEL, "WARNING").upper()

	@log_level.setter
	def log_level(self, value: str | None) -> None:
		_set_or_unset(ENV_DARKROUTE_LOG_LEVEL, value)

	@property
	def codegen_disabled(self) -> bool:
		raw = os.environ.get(ENV_DARKROUTE_DISABLE_CODEGEN, "")
		return raw.strip().lower() in _TRUTHY

	@codegen_disabled.setter
	def codegen_disabled(self, value: bool) -> None:
		_set_or_unset(ENV_DARKROUTE_DISABLE_CODEGEN, "1" if value else None)


env = DarkrouteEnv()

__all__ = [
	"ENV_DARKROUTE_DISABLE_CODEGEN",
	"ENV_DARKROUTE_LOG_LEVEL",
	"ENV_DARKROUTE_OUTPUT_DIR",
	"DarkrouteEnv",
	"env",
]
