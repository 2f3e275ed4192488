"""
ESLint configuration discovery for Rulescope.

Tries a fixed, ordered list of candidate sources and returns the first one
that exists and parses:

1. .eslintrc.js        (evaluated by node)
2. .eslintrc.cjs       (evaluated by node)
3. .eslintrc.yaml
4. .eslintrc.yml
5. .eslintrc.json
6. package.json        (the "eslintConfig" key)

A candidate that fails to parse is logged and skipped; only when every
candidate is absent or broken does resolution fail.
"""

from __future__ import annotations

import json
import logging
import shutil
import subprocess
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Any, Callable, Mapping, Sequence

import yaml

from .errors import CandidateMissing, CandidateParseError, ConfigurationNotFound

logger = logging.getLogger(__name__)

# Prints the module.exports of a CommonJS config as JSON.
_NODE_DUMP_SCRIPT = (
    "const path = require('path');"
    "const mod = require(path.resolve(process.argv[1]));"
    "const cfg = mod && mod.__esModule && mod.default !== undefined ? mod.default : mod;"
    "process.stdout.write(JSON.stringify(cfg));"
)

DEFAULT_NODE_TIMEOUT = 30  # Seconds

PACKAGE_JSON_KEY = "eslintConfig"

Loader = Callable[[Path], dict[str, Any]]


def _ensure_mapping(data: Any, path: Path) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise CandidateParseError(
            f"{path.name}: expected a mapping at the top level, got {type(data).__name__}"
        )
    return data


def load_json_config(path: Path) -> dict[str, Any]:
    """Load a plain JSON config file."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise CandidateParseError(f"{path.name}: invalid JSON ({e})") from e
    except UnicodeDecodeError as e:
        raise CandidateParseError(f"{path.name}: not valid UTF-8 ({e})") from e
    except OSError as e:
        raise CandidateParseError(f"{path.name}: {e}") from e
    return _ensure_mapping(data, path)


def load_yaml_config(path: Path) -> dict[str, Any]:
    """Load a YAML config file with safe_load."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise CandidateParseError(f"{path.name}: invalid YAML ({e})") from e
    except UnicodeDecodeError as e:
        raise CandidateParseError(f"{path.name}: not valid UTF-8 ({e})") from e
    except OSError as e:
        raise CandidateParseError(f"{path.name}: {e}") from e
    return _ensure_mapping(data, path)


def load_package_json_config(path: Path) -> dict[str, Any]:
    """Load the eslintConfig section of a package.json manifest."""
    manifest = load_json_config(path)
    if PACKAGE_JSON_KEY not in manifest:
        raise CandidateMissing(f"{path.name} has no '{PACKAGE_JSON_KEY}' key")
    return _ensure_mapping(manifest[PACKAGE_JSON_KEY], path)


def load_script_config(path: Path, timeout: int = DEFAULT_NODE_TIMEOUT) -> dict[str, Any]:
    """
    Load a .js/.cjs config by letting node require() it.

    The file is executed by node, never by Python; the exported object is
    round-tripped through JSON, so function-valued settings are dropped.
    """
    node = shutil.which("node")
    if node is None:
        raise CandidateParseError(f"{path.name}: node is not installed, cannot evaluate script config")

    try:
        result = subprocess.run(
            [node, "-e", _NODE_DUMP_SCRIPT, str(path)],
            capture_output=True,
            text=True,
            timeout=timeout,
            cwd=str(path.parent),
        )
    except subprocess.TimeoutExpired as e:
        raise CandidateParseError(f"{path.name}: node timed out after {timeout}s") from e
    except OSError as e:
        raise CandidateParseError(f"{path.name}: could not run node ({e})") from e

    if result.returncode != 0:
        stderr = (result.stderr or "").strip().splitlines()
        reason = stderr[-1] if stderr else f"exit code {result.returncode}"
        raise CandidateParseError(f"{path.name}: node failed: {reason}")

    try:
        data = json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise CandidateParseError(f"{path.name}: config did not export a JSON-serialisable object") from e
    return _ensure_mapping(data, path)


@dataclass(frozen=True)
class CandidateSource:
    """One entry in the ordered list of places an ESLint config may live."""
    filename: str
    loader: Loader
    label: str = ""

    @property
    def display_name(self) -> str:
        return self.label or self.filename

    def path_in(self, root: Path) -> Path:
        return root / self.filename


def build_candidates(node_timeout: int = DEFAULT_NODE_TIMEOUT) -> tuple[CandidateSource, ...]:
    """Ordered candidate list, highest priority first. Order matters: see resolve_eslint_config()."""
    script_loader = partial(load_script_config, timeout=node_timeout)
    return (
        CandidateSource(".eslintrc.js", script_loader),
        CandidateSource(".eslintrc.cjs", script_loader),
        CandidateSource(".eslintrc.yaml", load_yaml_config),
        CandidateSource(".eslintrc.yml", load_yaml_config),
        CandidateSource(".eslintrc.json", load_json_config),
        CandidateSource("package.json", load_package_json_config, f"package.json ({PACKAGE_JSON_KEY})"),
    )


CANDIDATES: tuple[CandidateSource, ...] = build_candidates()


@dataclass(frozen=True)
class ResolutionAttempt:
    """Diagnostic record of evaluating a single candidate."""
    source: CandidateSource
    path: Path
    status: str  # missing, failed, loaded
    error: str | None = None


@dataclass(frozen=True)
class ResolvedConfig:
    """The winning candidate and its parsed document."""
    source: CandidateSource
    path: Path
    document: dict[str, Any]
    attempts: tuple[ResolutionAttempt, ...] = ()

    @property
    def rules(self) -> dict[str, Any]:
        return extract_rules(self.document)


def accepted_sources(candidates: Sequence[CandidateSource] = CANDIDATES) -> list[str]:
    """Names of all accepted config sources, in priority order."""
    return [c.display_name for c in candidates]


def resolve_eslint_config(
    root: Path,
    candidates: Sequence[CandidateSource] = CANDIDATES,
) -> ResolvedConfig:
    """
    Find and load the highest-priority ESLint config under root.

    Args:
        root: Project directory the candidate filenames are relative to.
        candidates: Ordered candidate list (highest priority first).

    Returns:
        ResolvedConfig for the first candidate that exists and parses.

    Raises:
        ConfigurationNotFound: if no candidate exists and parses.
    """
    attempts: list[ResolutionAttempt] = []

    for candidate in candidates:
        path = candidate.path_in(root)
        if not path.exists():
            attempts.append(ResolutionAttempt(candidate, path, "missing"))
            continue

        try:
            document = candidate.loader(path)
        except CandidateMissing as e:
            logger.debug("Skipping %s: %s", candidate.display_name, e)
            attempts.append(ResolutionAttempt(candidate, path, "missing", str(e)))
            continue
        except CandidateParseError as e:
            logger.warning("Could not load %s: %s", candidate.display_name, e)
            attempts.append(ResolutionAttempt(candidate, path, "failed", str(e)))
            continue

        attempts.append(ResolutionAttempt(candidate, path, "loaded"))
        logger.info("Loaded ESLint config from %s", candidate.display_name)
        return ResolvedConfig(
            source=candidate,
            path=path,
            document=document,
            attempts=tuple(attempts),
        )

    raise ConfigurationNotFound(accepted_sources(candidates), tuple(attempts))


def extract_rules(document: Mapping[str, Any]) -> dict[str, Any]:
    """Return the "rules" mapping of a config document, or {} if there is none."""
    rules = document.get("rules")
    if not isinstance(rules, Mapping):
        if rules is not None:
            logger.debug("Ignoring non-mapping 'rules' value of type %s", type(rules).__name__)
        return {}
    return dict(rules)
