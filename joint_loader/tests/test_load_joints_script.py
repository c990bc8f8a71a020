"""Tests for the load_joints dry-run script and logging setup."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from joint_loader.scripts.load_joints import DEFAULT_CONFIG, run
from joint_loader.utils import fs
from joint_loader.utils.logging_config import (
    ContextFormatter,
    current_context,
    log_context,
    pop_context,
    push_context,
)


class TestRun:
    def test_bundled_config_loads(self, capsys: pytest.CaptureFixture) -> None:
        assert run(DEFAULT_CONFIG)
        out = capsys.readouterr().out
        assert "[OK]   JOINT_0" in out
        assert "comp=5 pts" in out
        assert "JOINT_3: angular" in out
        assert "[FAIL]" not in out

    def test_single_joint(self, capsys: pytest.CaptureFixture) -> None:
        assert run(DEFAULT_CONFIG, joint=2)
        out = capsys.readouterr().out
        assert "JOINT_2" in out
        assert "JOINT_0" not in out

    def test_joint_out_of_range(self, capsys: pytest.CaptureFixture) -> None:
        assert run(DEFAULT_CONFIG, joint=9) is False
        assert "[FAIL] JOINT_9" in capsys.readouterr().out

    def test_negative_joint(self, capsys: pytest.CaptureFixture) -> None:
        assert run(DEFAULT_CONFIG, joint=-1) is False
        assert "[FAIL] joint -1: not activated" in capsys.readouterr().out

    def test_missing_config(self, tmp_path: Path) -> None:
        assert run(tmp_path / "absent.yaml") is False

    def test_failure_reported(self, tmp_path: Path, capsys) -> None:
        path = tmp_path / "machine.yaml"
        fs.atomic_yaml_dump({
            "TRAJ": {"AXES": 2},
            "JOINT_0": {"BACKLASH": "loose"},
        }, path)
        assert run(path, keep_going=True) is False
        out = capsys.readouterr().out
        assert "[FAIL] JOINT_0" in out
        assert "[OK]   JOINT_1" in out

    def test_dump_with_backup(self, tmp_path: Path) -> None:
        dump = tmp_path / "resolved.yaml"
        dump.write_text("old: true\n")
        assert run(DEFAULT_CONFIG, dump=dump)
        data = fs.load_yaml(dump)
        assert data["JOINT_3"]["TYPE"] == "ANGULAR"
        assert data["JOINT_0"]["ACTIVE"] is True
        assert (tmp_path / "resolved.yaml.bak").read_text() == "old: true\n"


class TestLoggingContext:
    def test_log_context_scoped(self) -> None:
        pop_context()
        push_context(app="test")
        with log_context(joint=3):
            assert current_context() == {"app": "test", "joint": 3}
        assert current_context() == {"app": "test"}
        pop_context()
        assert current_context() == {}

    def test_json_format_includes_context(self) -> None:
        formatter = ContextFormatter("json", use_color=False)
        record = logging.LogRecord(
            "joint_loader", logging.ERROR, __file__, 1, "bad %s", ("value",), None,
        )
        with log_context(joint=1):
            line = json.loads(formatter.format(record))
        assert line["msg"] == "bad value"
        assert line["lvl"] == "ERROR"
        assert line["joint"] == 1

    def test_human_format(self) -> None:
        formatter = ContextFormatter("human", use_color=False)
        record = logging.LogRecord(
            "joint_loader", logging.INFO, __file__, 1, "loaded", (), None,
        )
        with log_context(joint=0):
            line = formatter.format(record)
        assert "| joint=0 |" in line
        assert line.endswith("loaded")
