"""
Rulescope CLI - Build an LLM prompt for improving .cursorrules.

Commands:
    init      - Write a sample rulescope.yml
    generate  - Run repomix, extract ESLint rules, and write the prompt file
    rules     - Print the resolved ESLint rules as JSON
    sources   - Show the ESLint config candidates in priority order
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from dotenv import load_dotenv

# Load .env file from current directory
load_dotenv()
load_dotenv(Path.cwd() / ".env")

from . import __version__
from .config import CONFIG_FILENAME, RulescopeConfig
from .errors import ConfigurationNotFound
from .eslint import CANDIDATES, build_candidates, resolve_eslint_config
from .profile import NOT_INSTALLED, detect_dependency_version
from .prompt import render_prompt, write_prompt
from .repomix import PLACEHOLDER, collect_repomix


SAMPLE_CONFIG = """\
# Rulescope Configuration

# repomix packs the codebase into one text file for the prompt
repomix:
  enabled: true                # Set false to only read an existing output file
  command: repomix             # Falls back to `npx --yes repomix` if not on PATH
  output: repomix-output.txt   # Relative to the project root
  timeout: 120                 # Seconds

# .eslintrc.js / .eslintrc.cjs are evaluated with node
eslint:
  node_timeout: 30             # Seconds

# Prompt file settings
prompt:
  output: llm-prompt.txt       # Relative to the project root
  excerpt_chars: 2000          # Characters of repomix output to include
  dependency: react            # package.json dependency whose version is reported
"""

root_option = click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Project directory to read configs from",
)


def _step(message: str) -> None:
    click.echo(f"\n>> {message}...\n")


def _report_missing_config(error: ConfigurationNotFound) -> None:
    click.echo("ESLint config not found! Create one of:", err=True)
    for name in error.accepted:
        click.echo(f"  - {name}", err=True)


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """Rulescope - Build an LLM prompt for improving .cursorrules."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@root_option
@click.option("--force", is_flag=True, help="Overwrite existing configuration")
def init(root: Path, force: bool):
    """Write a sample rulescope.yml to the project root."""
    config_path = root.resolve() / CONFIG_FILENAME
    if config_path.exists() and not force:
        click.echo(f"  Skipped: {config_path} (already exists)")
        return
    config_path.write_text(SAMPLE_CONFIG)
    click.echo(f"  Created: {config_path}")


@main.command()
@root_option
@click.option("--output", "-o", default=None, help="Prompt file path (default from config)")
@click.option("--no-repomix", is_flag=True, help="Do not run repomix; use existing output if any")
@click.option("--excerpt-chars", default=None, type=click.IntRange(min=0), help="Characters of repomix output to include")
@click.option("--dependency", default=None, help="package.json dependency whose version is reported")
def generate(root: Path, output: str | None, no_repomix: bool, excerpt_chars: int | None, dependency: str | None):
    """Run repomix, extract ESLint rules, and write the LLM prompt.

    Examples:

        rulescope generate
        rulescope generate --no-repomix -o prompt.txt
        rulescope generate --dependency vue
    """
    root = root.resolve()
    config = RulescopeConfig.load(root)

    # CLI overrides
    if output:
        config.prompt.output = output
    if no_repomix:
        config.repomix.enabled = False
    if excerpt_chars is not None:
        config.prompt.excerpt_chars = excerpt_chars
    if dependency:
        config.prompt.dependency = dependency

    _step("Step 1: Extracting ESLint rules")
    try:
        resolved = resolve_eslint_config(root, build_candidates(config.eslint.node_timeout))
    except ConfigurationNotFound as e:
        _report_missing_config(e)
        sys.exit(1)
    rules = resolved.rules
    click.echo(f"  Loaded {len(rules)} rules from {resolved.source.display_name}")

    _step("Step 2: Running Repomix to analyze the codebase")
    repomix_text = collect_repomix(root, config.repomix, config.repomix_output_path(root))
    if repomix_text == PLACEHOLDER:
        click.echo("  Repomix output not found. Proceeding without it.")
    else:
        click.echo("  Repomix output loaded.")

    dep_name = config.prompt.dependency
    _step(f"Step 3: Checking {dep_name} version in package.json")
    version = detect_dependency_version(root, dep_name)
    click.echo(f"  {dep_name} version: {version or NOT_INSTALLED}")

    _step("Step 4: Generating LLM prompt")
    content = render_prompt(
        rules,
        repomix_text,
        dependency_name=dep_name,
        dependency_version=version,
        excerpt_chars=config.prompt.excerpt_chars,
    )
    prompt_path = write_prompt(config.prompt_output_path(root), content)

    click.echo(f"\nLLM prompt saved as '{prompt_path}'.")
    click.echo("Open it, copy its content, and paste it into an LLM chat.")


@main.command()
@root_option
def rules(root: Path):
    """Print the resolved ESLint rules as JSON."""
    root = root.resolve()
    config = RulescopeConfig.load(root)
    try:
        resolved = resolve_eslint_config(root, build_candidates(config.eslint.node_timeout))
    except ConfigurationNotFound as e:
        _report_missing_config(e)
        sys.exit(1)

    click.echo(f"Source: {resolved.source.display_name}", err=True)
    click.echo(json.dumps(resolved.rules, indent=2))


@main.command()
@root_option
def sources(root: Path):
    """Show ESLint config candidates in priority order."""
    root = root.resolve()
    for position, candidate in enumerate(CANDIDATES, 1):
        status = "present" if candidate.path_in(root).exists() else "absent"
        click.echo(f"  {position}. {candidate.display_name:<30} {status}")


if __name__ == "__main__":
    main()
