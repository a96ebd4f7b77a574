import logging

import pytest
from darkroute.env import (
	ENV_DARKROUTE_DISABLE_CODEGEN,
	ENV_DARKROUTE_LOG_LEVEL,
	ENV_DARKROUTE_OUTPUT_DIR,
)


@pytest.fixture(autouse=True)
def _darkroute_env(monkeypatch: pytest.MonkeyPatch):  # pyright: ignore[reportUnusedFunction]
	for name in (
		ENV_DARKROUTE_DISABLE_CODEGEN,
		ENV_DARKROUTE_LOG_LEVEL,
		ENV_DARKROUTE_OUTPUT_DIR,
	):
		monkeypatch.delenv(name, raising=False)
	logger = logging.getLogger("darkroute")
	handlers = list(logger.handlers)
	level = logger.level
	yield
	# The CLI installs a rich handler on the package logger
	logger.handlers = handlers
	logger.setLevel(level)
