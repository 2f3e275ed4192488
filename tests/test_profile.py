from __future__ import annotations

import json

from rulescope.profile import detect_dependency_version, read_package_manifest


def test_detects_version_from_dependencies(tmp_path):
    (tmp_path / "package.json").write_text(json.dumps({
        "dependencies": {"react": "^18.2.0"},
        "devDependencies": {"react": "^17.0.0"},
    }))

    assert detect_dependency_version(tmp_path, "react") == "^18.2.0"


def test_falls_back_to_dev_dependencies(tmp_path):
    (tmp_path / "package.json").write_text(json.dumps({
        "dependencies": {"lodash": "4.17.21"},
        "devDependencies": {"react": "~18.3.1"},
    }))

    assert detect_dependency_version(tmp_path, "react") == "~18.3.1"


def test_not_declared_returns_none(tmp_path):
    (tmp_path / "package.json").write_text(json.dumps({"dependencies": {"vue": "3.4.0"}}))

    assert detect_dependency_version(tmp_path, "react") is None


def test_missing_package_json_returns_none(tmp_path):
    assert read_package_manifest(tmp_path) is None
    assert detect_dependency_version(tmp_path) is None


def test_malformed_package_json_returns_none(tmp_path):
    (tmp_path / "package.json").write_text("{ not json")

    assert read_package_manifest(tmp_path) is None


def test_package_json_not_utf8_returns_none(tmp_path):
    (tmp_path / "package.json").write_bytes(b'{"name": "\xff"}')

    assert read_package_manifest(tmp_path) is None
    assert detect_dependency_version(tmp_path, "react") is None
