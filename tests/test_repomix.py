from __future__ import annotations

import subprocess
from unittest.mock import patch

import pytest

from rulescope.config import RepomixConfig
from rulescope.errors import ExternalToolFailure
from rulescope.repomix import (
    PLACEHOLDER,
    collect_repomix,
    find_repomix_command,
    load_repomix_output,
    run_repomix,
)


def test_find_repomix_prefers_binary():
    with patch("rulescope.repomix.shutil.which", side_effect=lambda name: f"/bin/{name}"):
        assert find_repomix_command() == ["repomix"]


def test_find_repomix_falls_back_to_npx():
    with patch("rulescope.repomix.shutil.which", side_effect=lambda name: "/bin/npx" if name == "npx" else None):
        assert find_repomix_command() == ["npx", "--yes", "repomix"]


def test_find_repomix_none_when_nothing_installed():
    with patch("rulescope.repomix.shutil.which", return_value=None):
        assert find_repomix_command() is None


def test_run_repomix_raises_when_missing(tmp_path):
    with patch("rulescope.repomix.shutil.which", return_value=None):
        with pytest.raises(ExternalToolFailure):
            run_repomix(tmp_path, tmp_path / "out.txt")


def test_run_repomix_passes_analyze_and_output(tmp_path):
    out = tmp_path / "out.txt"
    completed = subprocess.CompletedProcess(args=[], returncode=0, stdout="", stderr="")

    with patch("rulescope.repomix.shutil.which", return_value="/bin/repomix"), \
         patch("rulescope.repomix.subprocess.run", return_value=completed) as run:
        assert run_repomix(tmp_path, out) == out

    cmd = run.call_args[0][0]
    assert cmd == ["repomix", "analyze", "--output", str(out)]
    assert run.call_args[1]["cwd"] == str(tmp_path)


def test_collect_repomix_reads_fresh_output(tmp_path):
    out = tmp_path / "repomix-output.txt"

    def fake_run(cmd, **kwargs):
        out.write_text("packed repo contents")
        return subprocess.CompletedProcess(args=cmd, returncode=0, stdout="", stderr="")

    with patch("rulescope.repomix.shutil.which", return_value="/bin/repomix"), \
         patch("rulescope.repomix.subprocess.run", side_effect=fake_run):
        text = collect_repomix(tmp_path, RepomixConfig(), out)

    assert text == "packed repo contents"


def test_collect_repomix_missing_tool_uses_placeholder(tmp_path):
    with patch("rulescope.repomix.shutil.which", return_value=None):
        text = collect_repomix(tmp_path, RepomixConfig(), tmp_path / "repomix-output.txt")

    assert text == PLACEHOLDER


def test_collect_repomix_nonzero_exit_uses_placeholder(tmp_path):
    completed = subprocess.CompletedProcess(args=[], returncode=2, stdout="", stderr="bad flag")

    with patch("rulescope.repomix.shutil.which", return_value="/bin/repomix"), \
         patch("rulescope.repomix.subprocess.run", return_value=completed):
        text = collect_repomix(tmp_path, RepomixConfig(), tmp_path / "repomix-output.txt")

    assert text == PLACEHOLDER


def test_collect_repomix_timeout_uses_placeholder(tmp_path):
    with patch("rulescope.repomix.shutil.which", return_value="/bin/repomix"), \
         patch("rulescope.repomix.subprocess.run", side_effect=subprocess.TimeoutExpired("repomix", 1)):
        text = collect_repomix(tmp_path, RepomixConfig(timeout=1), tmp_path / "repomix-output.txt")

    assert text == PLACEHOLDER


def test_collect_repomix_disabled_reads_existing_file(tmp_path):
    out = tmp_path / "repomix-output.txt"
    out.write_text("from an earlier run")

    with patch("rulescope.repomix.subprocess.run") as run:
        text = collect_repomix(tmp_path, RepomixConfig(enabled=False), out)

    run.assert_not_called()
    assert text == "from an earlier run"


def test_nonzero_exit_keeps_returncode(tmp_path):
    completed = subprocess.CompletedProcess(args=[], returncode=3, stdout="", stderr="")

    with patch("rulescope.repomix.shutil.which", return_value="/bin/repomix"), \
         patch("rulescope.repomix.subprocess.run", return_value=completed):
        with pytest.raises(ExternalToolFailure) as exc_info:
            run_repomix(tmp_path, tmp_path / "out.txt")

    assert exc_info.value.returncode == 3


def test_load_repomix_output_missing_file(tmp_path):
    assert load_repomix_output(tmp_path / "nope.txt") == PLACEHOLDER
