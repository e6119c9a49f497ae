"""Unit tests for the command-backed scan engine.

Subprocess calls are mocked; no engine binary is required.
"""

import asyncio
import json

import pytest
from unittest.mock import AsyncMock, patch

from depaudit.core.errors import ScanEngineError
from depaudit.core.models import ProjectResult, ScanOptions
from depaudit.core.normalize import normalize_error
from depaudit.engine import CommandScanEngine, EngineRejection, detect_target_file


def _mock_process(stdout: str, stderr: str = "", returncode: int = 0):
    process = AsyncMock()
    process.communicate = AsyncMock(return_value=(stdout.encode(), stderr.encode()))
    process.returncode = returncode
    return process


@pytest.mark.asyncio
async def test_clean_exit_returns_payload(config, clean_payload, tmp_path):
    engine = CommandScanEngine(config)

    with patch("depaudit.engine.base.shutil.which", return_value="/usr/bin/depaudit-engine"):
        with patch("depaudit.engine.base.asyncio.create_subprocess_exec") as mock_exec:
            mock_exec.return_value = _mock_process(json.dumps(clean_payload))

            payload = await engine.test(str(tmp_path), ScanOptions(path=str(tmp_path)))

    assert payload == clean_payload
    cmd = list(mock_exec.call_args.args)
    assert cmd[:4] == ["depaudit-engine", "test", str(tmp_path), "--json"]


@pytest.mark.asyncio
async def test_vulnerable_exit_rejects_with_report(config, vulnerable_payload, tmp_path):
    engine = CommandScanEngine(config)

    with patch("depaudit.engine.base.shutil.which", return_value="/usr/bin/depaudit-engine"):
        with patch("depaudit.engine.base.asyncio.create_subprocess_exec") as mock_exec:
            mock_exec.return_value = _mock_process(json.dumps(vulnerable_payload), returncode=1)

            with pytest.raises(EngineRejection) as exc_info:
                await engine.test(str(tmp_path), ScanOptions(path=str(tmp_path)))

    outcome = normalize_error(exc_info.value.reason)
    assert isinstance(outcome, ProjectResult)
    assert outcome.unique_count == 1
    assert outcome.code == "VULNS"
    assert "cwd" not in mock_exec.call_args.kwargs


@pytest.mark.asyncio
async def test_failed_exit_uses_stderr(config, tmp_path):
    engine = CommandScanEngine(config)

    with patch("depaudit.engine.base.shutil.which", return_value="/usr/bin/depaudit-engine"):
        with patch("depaudit.engine.base.asyncio.create_subprocess_exec") as mock_exec:
            mock_exec.return_value = _mock_process("", "Could not read package.json", returncode=2)

            with pytest.raises(EngineRejection) as exc_info:
                await engine.test(str(tmp_path), ScanOptions(path=str(tmp_path)))

    assert exc_info.value.reason == {"message": "Could not read package.json", "code": 2}


@pytest.mark.asyncio
async def test_missing_binary(config, tmp_path):
    engine = CommandScanEngine(config)

    with patch("depaudit.engine.base.shutil.which", return_value=None):
        with pytest.raises(ScanEngineError) as exc_info:
            await engine.test(str(tmp_path), ScanOptions(path=str(tmp_path)))

    assert exc_info.value.code == "ENGINE_NOT_INSTALLED"


@pytest.mark.asyncio
async def test_timeout(config, tmp_path):
    engine = CommandScanEngine(config)

    with patch("depaudit.engine.base.shutil.which", return_value="/usr/bin/depaudit-engine"):
        with patch(
            "depaudit.engine.command.run_subprocess",
            new=AsyncMock(side_effect=asyncio.TimeoutError()),
        ):
            with pytest.raises(ScanEngineError) as exc_info:
                await engine.test(str(tmp_path), ScanOptions(path=str(tmp_path)))

    assert exc_info.value.code == "ENGINE_TIMEOUT"


@pytest.mark.asyncio
async def test_invalid_json_output(config, tmp_path):
    engine = CommandScanEngine(config)

    with patch("depaudit.engine.base.shutil.which", return_value="/usr/bin/depaudit-engine"):
        with patch("depaudit.engine.base.asyncio.create_subprocess_exec") as mock_exec:
            mock_exec.return_value = _mock_process("not json")

            with pytest.raises(ScanEngineError) as exc_info:
                await engine.test(str(tmp_path), ScanOptions(path=str(tmp_path)))

    assert exc_info.value.code == "ENGINE_BAD_OUTPUT"


@pytest.mark.asyncio
async def test_detected_manifest_is_recorded_and_passed(config, clean_payload, tmp_path):
    (tmp_path / "Gemfile.lock").write_text("GEM\n")
    options = ScanOptions(path=str(tmp_path), org="acme", severity_threshold="high")
    engine = CommandScanEngine(config)

    with patch("depaudit.engine.base.shutil.which", return_value="/usr/bin/depaudit-engine"):
        with patch("depaudit.engine.base.asyncio.create_subprocess_exec") as mock_exec:
            mock_exec.return_value = _mock_process(json.dumps(clean_payload))

            await engine.test(str(tmp_path), options)

    assert options.file == "Gemfile.lock"
    assert options.package_manager == "rubygems"
    cmd = list(mock_exec.call_args.args)
    assert cmd[4:] == [
        "--org", "acme",
        "--file", "Gemfile.lock",
        "--package-manager", "rubygems",
        "--severity-threshold", "high",
    ]


def test_detect_prefers_yarn_lockfile(tmp_path):
    (tmp_path / "package.json").write_text("{}")
    (tmp_path / "yarn.lock").write_text("")

    assert detect_target_file(str(tmp_path)) == ("yarn.lock", "yarn")


def test_detect_npm_manifest(tmp_path):
    (tmp_path / "package.json").write_text("{}")

    assert detect_target_file(str(tmp_path)) == ("package.json", "npm")


def test_detect_nothing(tmp_path):
    assert detect_target_file(str(tmp_path)) is None
