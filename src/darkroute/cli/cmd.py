"""
Command-line interface for darkroute.

This module provides the CLI commands for generating query-params modules
and inspecting how declared types are classified.
"""
# typer relies on function calls used as default values
# pyright: reportCallInDefaultInitializer=false

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from darkroute.cli.helpers import configure_logging, load_target
from darkroute.codegen.codegen import Codegen, CodegenConfig
from darkroute.declare import declared_types, get_query_params_info
from darkroute.env import env
from darkroute.errors import ErrorReporter

cli = typer.Typer(
	name="darkroute",
	help="darkroute - query-parameter codecs and callback registries for dataclasses",
	no_args_is_help=True,
)


def _load_types(targets: list[str], console: Console) -> tuple[list[type], int]:
	reporter = ErrorReporter()
	types: list[type] = []
	failures = 0
	for target in targets:
		console.log(f"📁 Loading types from: {target}")
		try:
			module = load_target(target)
		except Exception as exc:
			failures += 1
			console.log(f"❌ Could not load {target}: {exc}")
			reporter.report(exc, code="load", details={"target": target})
			continue
		found = declared_types(module)
		if not found:
			console.log(f"⚠️  No @query_params types found in {target}")
		types.extend(found)
	return types, failures


@cli.command("generate")
def generate(
	targets: list[str] = typer.Argument(
		..., help="Python files ('path/to/file.py') or modules ('package.module')"
	),
	output: Path | None = typer.Option(
		None, "--output", "-o", help="Directory for the generated modules"
	),
	clean: bool = typer.Option(
		False, "--clean/--no-clean", help="Remove stale generated modules"
	),
	verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logs"),
):
	"""Generate query-params modules for every declared type."""
	configure_logging("DEBUG" if verbose else env.log_level)
	console = Console()
	console.log("🔄 Generating query-params modules...")

	types, failures = _load_types(targets, console)
	console.log(f"📋 Found {len(types)} types")

	codegen = Codegen(CodegenConfig(output_dir=output, clean=clean))
	written = codegen.generate_all(types)
	for path in sorted(written):
		console.log(f"  {path}")

	if env.codegen_disabled:
		console.log("⚠️  Code generation is disabled, nothing was written")
	else:
		failures += max(len(types) - len(written), 0)
	if failures:
		console.log("❌ Some targets or types could not be generated")
		raise typer.Exit(1)
	if env.codegen_disabled:
		return
	if types:
		console.log(f"✅ Generated {len(written)} modules successfully!")
	else:
		console.log("⚠️  No types found to generate")


@cli.command("inspect")
def inspect(
	target: str = typer.Argument(
		..., help="Python file ('path/to/file.py') or module ('package.module')"
	),
):
	"""Show how the fields of each declared type are classified."""
	configure_logging(env.log_level)
	console = Console()
	types, failures = _load_types([target], console)
	if failures:
		raise typer.Exit(1)

	table = Table(title=f"Query params in {target}")
	table.add_column("Type")
	table.add_column("Simple keys")
	table.add_column("Encoded field")
	table.add_column("Callback field")
	for cls in types:
		classification = get_query_params_info(cls).classification
		table.add_row(
			cls.__name__,
			", ".join(classification.simple_keys) or "-",
			classification.encoded_field or "-",
			classification.callback_field or "-",
		)
	console.print(table)


def main():
	"""Main CLI entry point."""
	try:
		cli()
	except KeyboardInterrupt:
		typer.echo("\n👋 Interrupted")
		raise typer.Exit(130) from None


if __name__ == "__main__":
	main()
