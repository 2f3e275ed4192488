"""
Prompt assembly for Rulescope.

Renders the LLM prompt from the extracted ESLint rules, the tracked
dependency version and a repomix excerpt using a Jinja2 template.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader

from .profile import NOT_INSTALLED

DEFAULT_EXCERPT_CHARS = 2000


def _template_env() -> Environment:
    template_dir = Path(__file__).resolve().parent / "templates"
    return Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def format_rules(rules: dict[str, Any]) -> str:
    return json.dumps(rules, indent=2, ensure_ascii=False)


def excerpt(text: str, max_chars: int = DEFAULT_EXCERPT_CHARS) -> str:
    """Leading slice of text, at most max_chars long."""
    if max_chars < 0:
        max_chars = 0
    return text[:max_chars]


def render_prompt(
    rules: dict[str, Any],
    repomix_text: str,
    dependency_name: str = "react",
    dependency_version: str | None = None,
    excerpt_chars: int = DEFAULT_EXCERPT_CHARS,
) -> str:
    """
    Render the prompt text.

    Args:
        rules: Extracted ESLint rule set
        repomix_text: Full repomix output (or placeholder)
        dependency_name: Name of the tracked package.json dependency
        dependency_version: Its declared version, None if not declared
        excerpt_chars: Max characters of repomix output to include

    Returns:
        Prompt text ready to paste into an LLM chat
    """
    template = _template_env().get_template("llm_prompt.txt.j2")
    return template.render(
        rules_json=format_rules(rules),
        dependency_name=dependency_name,
        dependency_version=dependency_version or NOT_INSTALLED,
        repomix_excerpt=excerpt(repomix_text, excerpt_chars),
    )


def write_prompt(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path
