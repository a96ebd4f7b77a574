import logging
import re
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from darkroute.codegen.emitter import render_module
from darkroute.declare import QueryParamsInfo, get_query_params_info
from darkroute.env import env
from darkroute.errors import ErrorReporter

logger = logging.getLogger(__file__)

GENERATED_MARKER = "# GENERATED QUERY PARAMS EXTENSION - DO NOT MODIFY BY HAND"

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def snake_case(name: str) -> str:
	return _CAMEL_BOUNDARY.sub("_", name).lower()


@dataclass
class CodegenConfig:
	"""
	Configuration for code generation.

	Attributes:
	    output_dir (Path | str | None): Directory for the generated modules.
	    suffix (str): File name suffix of generated modules.
	    clean (bool): Remove generated modules that were not produced this run.
	"""

	output_dir: Path | str | None = None
	"""Directory for the generated modules. If not provided, resolved from env,
	then next to the module declaring each type."""

	suffix: str = "_query_params.py"
	"""File name suffix of generated modules."""

	clean: bool = False
	"""Remove stale generated modules from the output directories."""

	@property
	def resolved_output_dir(self) -> Path | None:
		if self.output_dir is not None:
			return Path(self.output_dir)
		if env.output_dir:
			return Path(env.output_dir)
		return None

	def output_path(self, cls: type) -> Path:
		"""Where the generated module of `cls` is written."""
		filename = snake_case(cls.__name__) + self.suffix
		out = self.resolved_output_dir
		if out is not None:
			return out / filename
		module = sys.modules.get(cls.__module__)
		module_file = getattr(module, "__file__", None)
		if module_file is None:
			return Path.cwd() / filename
		return Path(module_file).parent / filename


def write_file_if_changed(path: Path, content: str) -> Path:
	"""Write content to file only if it has changed."""
	if path.exists():
		try:
			current_content = path.read_text()
			if current_content == content:
				logger.debug("Unchanged generated file: %s", path)
				return path  # Skip writing, content is the same
		except OSError:
			logger.warning("Can't read file %s", path.absolute())
			# If we can't read the file for any reason, just write it

	path.parent.mkdir(exist_ok=True, parents=True)
	path.write_text(content)
	return path


class Codegen:
	cfg: CodegenConfig

	def __init__(
		self, config: CodegenConfig | None = None, reporter: ErrorReporter | None = None
	) -> None:
		self.cfg = config or CodegenConfig()
		self.reporter = reporter or ErrorReporter()

	def generate(self, cls: type) -> Path:
		"""Write the generated module of one declared type."""
		info: QueryParamsInfo = get_query_params_info(cls)
		content = render_module(info)
		return write_file_if_changed(self.cfg.output_path(cls), content)

	def generate_all(self, types: Sequence[type]) -> set[Path]:
		if env.codegen_disabled:
			logger.info("Code generation disabled, skipping %d types", len(types))
			return set()

		# Keep track of all generated files
		generated_files: set[Path] = set()
		for cls in types:
			try:
				generated_files.add(self.generate(cls))
			except Exception as exc:
				# One failing type does not stop the others
				self.reporter.report(
					exc, code="codegen", details={"type": cls.__qualname__}
				)

		if self.cfg.clean:
			self._remove_stale_files(generated_files)
		return generated_files

	def _remove_stale_files(self, generated_files: set[Path]) -> None:
		folders = {path.parent for path in generated_files}
		if self.cfg.resolved_output_dir is not None:
			folders.add(self.cfg.resolved_output_dir)
		for folder in folders:
			if not folder.is_dir():
				continue
			for path in folder.glob(f"*{self.cfg.suffix}"):
				if path in generated_files or not path.is_file():
					continue
				# Never delete a hand-written module sharing the suffix
				try:
					if GENERATED_MARKER not in path.read_text():
						continue
					path.unlink()
					logger.debug("Removed stale file: %s", path)
				except OSError as e:
					logger.warning("Could not remove stale file %s: %s", path, e)


__all__ = [
	"GENERATED_MARKER",
	"Codegen",
	"CodegenConfig",
	"snake_case",
	"write_file_if_changed",
]
