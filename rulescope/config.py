"""
Configuration management for Rulescope.

Loads:
- rulescope.yml: Optional tool configuration (repomix invocation, ESLint script
  evaluation, prompt output)

Environment variables (RULESCOPE_*) override the file; CLI options override both.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

CONFIG_FILENAME = "rulescope.yml"


@dataclass
class RepomixConfig:
    """How to run repomix."""
    enabled: bool = True
    command: str = "repomix"
    output: str = "repomix-output.txt"  # Relative to the project root
    timeout: int = 120  # Seconds


@dataclass
class EslintConfig:
    """How to evaluate .eslintrc.js/.eslintrc.cjs configs."""
    node_timeout: int = 30  # Seconds


@dataclass
class PromptConfig:
    """Prompt file settings."""
    output: str = "llm-prompt.txt"  # Relative to the project root
    excerpt_chars: int = 2000  # How much repomix output goes into the prompt
    dependency: str = "react"  # package.json dependency whose version is reported


@dataclass
class RulescopeConfig:
    """Complete Rulescope configuration."""
    repomix: RepomixConfig = field(default_factory=RepomixConfig)
    prompt: PromptConfig = field(default_factory=PromptConfig)
    eslint: EslintConfig = field(default_factory=EslintConfig)

    def repomix_output_path(self, root: Path) -> Path:
        return _resolve(root, self.repomix.output)

    def prompt_output_path(self, root: Path) -> Path:
        return _resolve(root, self.prompt.output)

    @classmethod
    def load(cls, root: Path) -> "RulescopeConfig":
        """Load configuration from the project root, then apply env overrides."""
        config = cls()

        config_path = root / CONFIG_FILENAME
        if config_path.exists():
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
            config = cls._parse(data)

        config.apply_env(os.environ)
        return config

    @classmethod
    def _parse(cls, data: dict[str, Any]) -> "RulescopeConfig":
        """Parse configuration dictionary."""
        repomix_data = data.get("repomix") or {}
        repomix = RepomixConfig(
            enabled=repomix_data.get("enabled", True),
            command=repomix_data.get("command", "repomix"),
            output=repomix_data.get("output", "repomix-output.txt"),
            timeout=int(repomix_data.get("timeout", 120)),
        )

        prompt_data = data.get("prompt") or {}
        prompt = PromptConfig(
            output=prompt_data.get("output", "llm-prompt.txt"),
            excerpt_chars=int(prompt_data.get("excerpt_chars", 2000)),
            dependency=prompt_data.get("dependency", "react"),
        )

        eslint_data = data.get("eslint") or {}
        eslint = EslintConfig(
            node_timeout=int(eslint_data.get("node_timeout", 30)),
        )

        return cls(repomix=repomix, prompt=prompt, eslint=eslint)

    def apply_env(self, environ: Any) -> None:
        """Apply RULESCOPE_* environment overrides in place."""
        if environ.get("RULESCOPE_OUTPUT"):
            self.prompt.output = environ["RULESCOPE_OUTPUT"]
        if environ.get("RULESCOPE_REPOMIX_COMMAND"):
            self.repomix.command = environ["RULESCOPE_REPOMIX_COMMAND"]
        if environ.get("RULESCOPE_DEPENDENCY"):
            self.prompt.dependency = environ["RULESCOPE_DEPENDENCY"]


def _resolve(root: Path, value: str) -> Path:
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = root / path
    return path
