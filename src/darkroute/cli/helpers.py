from __future__ import annotations

import importlib
import importlib.util
import logging
import sys
from pathlib import Path
from types import ModuleType

from rich.logging import RichHandler

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
	"""Route darkroute logs through rich."""
	root = logging.getLogger("darkroute")
	root.setLevel(level)
	if not any(isinstance(h, RichHandler) for h in root.handlers):
		root.addHandler(RichHandler(show_path=False, markup=False))


def _module_name_for(file_path: Path) -> str:
	# Use the dotted package path when the file lives inside packages
	parts = [file_path.stem]
	parent = file_path.parent
	while (parent / "__init__.py").exists():
		parts.insert(0, parent.name)
		parent = parent.parent
	return ".".join(parts)


def load_target(target: str) -> ModuleType:
	"""Import a module from a file path (`path/to/file.py`) or a dotted name.

	Raises FileNotFoundError for a missing file, and whatever the module
	raises while being imported.
	"""
	candidate = Path(target)
	if candidate.suffix != ".py":
		return importlib.import_module(target)

	if not candidate.exists():
		raise FileNotFoundError(f"File not found: {candidate}")
	file_path = candidate.resolve()
	module_name = _module_name_for(file_path)
	existing = sys.modules.get(module_name)
	if existing is not None and getattr(existing, "__file__", None) == str(file_path):
		return existing

	# Add the package root to sys.path so that imports from the target work
	root = file_path.parent
	for _ in range(module_name.count(".")):
		root = root.parent
	root_str = str(root)
	added = root_str not in sys.path
	if added:
		sys.path.insert(0, root_str)

	spec = importlib.util.spec_from_file_location(module_name, file_path)
	if spec is None or spec.loader is None:
		raise ImportError(f"Could not load module from: {file_path}")
	module = importlib.util.module_from_spec(spec)
	# Generated modules import the declaring module by name
	sys.modules[module_name] = module
	try:
		spec.loader.exec_module(module)
	except BaseException:
		sys.modules.pop(module_name, None)
		if added:
			sys.path.remove(root_str)
		raise
	logger.debug("Loaded %s from %s", module_name, file_path)
	return module
