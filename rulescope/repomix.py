"""
Repomix integration - packs the repo into a single text file for the prompt.

repomix packs all source files into one structured text optimised for LLMs,
respecting .gitignore and filtering binaries. Its output is treated as
opaque text.

Install:  npm install -g repomix    (or use npx, no install needed)
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

from .config import RepomixConfig
from .errors import ExternalToolFailure

logger = logging.getLogger(__name__)

PLACEHOLDER = "No repomix data found."


def find_repomix_command(command: str = "repomix") -> list[str] | None:
    """Return the argv prefix to invoke repomix, or None if unavailable."""
    if shutil.which(command):
        return [command]
    # npx downloads repomix on demand
    if shutil.which("npx"):
        return ["npx", "--yes", "repomix"]
    return None


def run_repomix(
    root: Path,
    output_path: Path,
    command: str = "repomix",
    timeout: int = 120,
) -> Path:
    """
    Run `repomix analyze --output <output_path>` inside root.

    Raises:
        ExternalToolFailure: if repomix is missing, exits non-zero, or times out.
    """
    cmd_base = find_repomix_command(command)
    if cmd_base is None:
        raise ExternalToolFailure(
            f"neither {command} nor npx found. Install with: npm install -g repomix"
        )

    cmd = [*cmd_base, "analyze", "--output", str(output_path)]
    logger.debug("Running: %s", " ".join(cmd))
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
            cwd=str(root),
        )
    except subprocess.TimeoutExpired as e:
        raise ExternalToolFailure(f"repomix timed out after {timeout}s") from e
    except OSError as e:
        raise ExternalToolFailure(f"could not start repomix: {e}") from e

    if result.returncode != 0:
        raise ExternalToolFailure(
            f"repomix exited {result.returncode}: {(result.stderr or '')[:500]}",
            returncode=result.returncode,
        )
    return output_path


def load_repomix_output(path: Path) -> str:
    """Read repomix output, or return the placeholder if it is not there."""
    if not path.exists():
        logger.info("Repomix output not found at %s", path)
        return PLACEHOLDER
    return path.read_text(encoding="utf-8", errors="ignore")


def collect_repomix(root: Path, config: RepomixConfig, output_path: Path) -> str:
    """
    Run repomix (if enabled) and return its output text.

    A failed or missing repomix is not fatal: whatever output file already
    exists is used, otherwise the placeholder.
    """
    if config.enabled:
        try:
            run_repomix(root, output_path, command=config.command, timeout=config.timeout)
        except ExternalToolFailure as e:
            logger.warning("Repomix failed, proceeding without fresh output: %s", e)
    else:
        logger.debug("Repomix disabled, reading existing output only")

    return load_repomix_output(output_path)
