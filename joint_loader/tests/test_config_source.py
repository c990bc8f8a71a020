"""Tests for the section-keyed config source and unit parsing.

Validates that:
    - YAML files open (and bad ones report False instead of raising)
    - Absent keys/sections return None, never an error
    - Present values convert per kind, malformed ones raise MalformedValue
    - Unit-aware values accept numbers, unit names and "<number> <unit>"
    - The bundled machine.yaml is well-formed
"""

from __future__ import annotations

import math
from pathlib import Path

import pytest

from joint_loader.configs.source import (
    ConfigSource,
    MalformedValue,
    SourceUnavailable,
    ValueKind,
)
from joint_loader.configs.trajectory import TrajectoryContext
from joint_loader.configs.units import (
    ANGULAR_UNITS,
    LINEAR_UNITS,
    UnitError,
    parse_unit_value,
)
from joint_loader.params import JointType


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def source() -> ConfigSource:
    return ConfigSource.from_mapping({
        "TRAJ": {"AXES": 3, "LINEAR_UNITS": "inch"},
        "JOINT_0": {
            "TYPE": "angular",
            "UNITS": "2 rad",
            "MAX_VELOCITY": "12.5",
            "HOME_SEQUENCE": "-1",
            "HOME_USE_INDEX": "yes",
            "HOME_IS_SHARED": False,
            "COMP_FILE": "comp.txt",
            "EMPTY": "  ",
            "NESTED": {"a": 1},
        },
        "JOINT_1": None,
    })


@pytest.fixture()
def bundled_config() -> Path:
    return Path(__file__).resolve().parent.parent / "configs" / "machine.yaml"


# ---------------------------------------------------------------------------
# Opening
# ---------------------------------------------------------------------------


class TestOpen:
    def test_open_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "m.yaml"
        path.write_text("TRAJ:\n  AXES: 2\n")
        src = ConfigSource()
        assert src.open(path)
        assert src.is_open
        assert src.path == path
        assert src.find("AXES", "TRAJ", ValueKind.INT) == 2

    def test_open_missing_file(self, tmp_path: Path) -> None:
        src = ConfigSource()
        assert src.open(tmp_path / "nope.yaml") is False
        assert not src.is_open

    def test_open_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("TRAJ: [unclosed\n")
        assert ConfigSource().open(path) is False

    def test_open_non_section_layout(self, tmp_path: Path) -> None:
        path = tmp_path / "flat.yaml"
        path.write_text("- a\n- b\n")
        assert ConfigSource().open(path) is False

    def test_section_must_be_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "sect.yaml"
        path.write_text("TRAJ: 3\n")
        assert ConfigSource().open(path) is False

    def test_find_on_closed_source(self) -> None:
        with pytest.raises(SourceUnavailable):
            ConfigSource().find("AXES", "TRAJ")

    def test_empty_file_has_no_sections(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        src = ConfigSource()
        assert src.open(path)
        assert src.sections() == []


# ---------------------------------------------------------------------------
# Lookup and conversion
# ---------------------------------------------------------------------------


class TestFind:
    def test_absent_key(self, source: ConfigSource) -> None:
        assert source.find("BACKLASH", "JOINT_0", ValueKind.FLOAT) is None

    def test_absent_section(self, source: ConfigSource) -> None:
        assert source.find("TYPE", "JOINT_9") is None

    def test_null_section(self, source: ConfigSource) -> None:
        assert source.find("TYPE", "JOINT_1") is None

    def test_blank_value_is_absent(self, source: ConfigSource) -> None:
        assert source.find("EMPTY", "JOINT_0") is None

    def test_float_from_string(self, source: ConfigSource) -> None:
        assert source.find("MAX_VELOCITY", "JOINT_0", ValueKind.FLOAT) == 12.5

    def test_int_from_string(self, source: ConfigSource) -> None:
        assert source.find("HOME_SEQUENCE", "JOINT_0", ValueKind.INT) == -1

    def test_bool_word(self, source: ConfigSource) -> None:
        assert source.find("HOME_USE_INDEX", "JOINT_0", ValueKind.BOOL) is True
        assert source.find("HOME_IS_SHARED", "JOINT_0", ValueKind.BOOL) is False

    def test_string(self, source: ConfigSource) -> None:
        assert source.find("COMP_FILE", "JOINT_0") == "comp.txt"

    def test_nested_value_is_malformed(self, source: ConfigSource) -> None:
        with pytest.raises(MalformedValue):
            source.find("NESTED", "JOINT_0")

    def test_float_malformed(self, source: ConfigSource) -> None:
        with pytest.raises(MalformedValue) as info:
            source.find("COMP_FILE", "JOINT_0", ValueKind.FLOAT)
        assert info.value.key == "COMP_FILE"
        assert info.value.section == "JOINT_0"
        assert "JOINT_0" in str(info.value)

    @pytest.mark.parametrize("raw", [1.5, "1.5", "seven", True])
    def test_int_malformed(self, raw: object) -> None:
        src = ConfigSource.from_mapping({"S": {"K": raw}})
        with pytest.raises(MalformedValue):
            src.find("K", "S", ValueKind.INT)

    @pytest.mark.parametrize("raw", ["nan", "inf", "-inf", float("nan"), float("inf")])
    def test_float_not_finite(self, raw: object) -> None:
        src = ConfigSource.from_mapping({"JOINT_0": {"MIN_LIMIT": raw}})
        with pytest.raises(MalformedValue) as info:
            src.find("MIN_LIMIT", "JOINT_0", ValueKind.FLOAT)
        assert info.value.key == "MIN_LIMIT"

    def test_int_from_whole_float(self) -> None:
        src = ConfigSource.from_mapping({"S": {"K": 4.0}})
        assert src.find("K", "S", ValueKind.INT) == 4

    @pytest.mark.parametrize("raw", ["maybe", 2, "2"])
    def test_bool_malformed(self, raw: object) -> None:
        src = ConfigSource.from_mapping({"S": {"K": raw}})
        with pytest.raises(MalformedValue):
            src.find("K", "S", ValueKind.BOOL)

    def test_bool_from_int(self) -> None:
        src = ConfigSource.from_mapping({"S": {"ON": 1, "OFF": 0}})
        assert src.find("ON", "S", ValueKind.BOOL) is True
        assert src.find("OFF", "S", ValueKind.BOOL) is False

    def test_bool_is_not_a_float(self) -> None:
        src = ConfigSource.from_mapping({"S": {"K": True}})
        with pytest.raises(MalformedValue):
            src.find("K", "S", ValueKind.FLOAT)

    def test_units_kind(self, source: ConfigSource) -> None:
        value = source.find("UNITS", "JOINT_0", ValueKind.ANGULAR_UNITS)
        assert value == pytest.approx(2 * math.pi / 180)

    def test_choice(self, source: ConfigSource) -> None:
        assert source.find_choice("TYPE", "JOINT_0", JointType.choices()) \
            is JointType.ANGULAR

    def test_choice_numeric_code(self) -> None:
        src = ConfigSource.from_mapping({"S": {"TYPE": 1}})
        assert src.find_choice("TYPE", "S", JointType.choices()) is JointType.LINEAR

    def test_choice_unknown(self) -> None:
        src = ConfigSource.from_mapping({"S": {"TYPE": "ROTARY"}})
        with pytest.raises(MalformedValue, match="LINEAR"):
            src.find_choice("TYPE", "S", JointType.choices())


# ---------------------------------------------------------------------------
# Units
# ---------------------------------------------------------------------------


class TestUnits:
    def test_bare_number(self) -> None:
        assert parse_unit_value(0.5, LINEAR_UNITS) == 0.5
        assert parse_unit_value("0.5", LINEAR_UNITS) == 0.5

    def test_unit_name(self) -> None:
        assert parse_unit_value("inch", LINEAR_UNITS) == pytest.approx(1 / 25.4)
        assert parse_unit_value("MM", LINEAR_UNITS) == 1.0
        assert parse_unit_value("grad", ANGULAR_UNITS) == 0.9

    def test_number_with_unit(self) -> None:
        assert parse_unit_value("1 in", LINEAR_UNITS) == pytest.approx(1 / 25.4)
        assert parse_unit_value("10 cm", LINEAR_UNITS) == pytest.approx(1.0)

    @pytest.mark.parametrize("raw", [
        "furlong", "1 furlong", "x in", "1 2 3", True, "nan", "inf mm",
    ])
    def test_invalid(self, raw: object) -> None:
        with pytest.raises(UnitError):
            parse_unit_value(raw, LINEAR_UNITS)

    def test_angular_name_not_linear(self) -> None:
        with pytest.raises(UnitError):
            parse_unit_value("deg", LINEAR_UNITS)


# ---------------------------------------------------------------------------
# Trajectory context
# ---------------------------------------------------------------------------


class TestTrajectoryContext:
    def test_defaults_when_absent(self) -> None:
        ctx = TrajectoryContext.from_source(ConfigSource.from_mapping({}))
        assert ctx == TrajectoryContext()

    def test_reads_traj_section(self, source: ConfigSource) -> None:
        ctx = TrajectoryContext.from_source(source)
        assert ctx.linear_units == pytest.approx(1 / 25.4)
        assert ctx.angular_units == 1.0

    def test_malformed_traj_value(self) -> None:
        src = ConfigSource.from_mapping({"TRAJ": {"ANGULAR_UNITS": "parsec"}})
        with pytest.raises(MalformedValue):
            TrajectoryContext.from_source(src)


# ---------------------------------------------------------------------------
# Bundled config
# ---------------------------------------------------------------------------


class TestBundledConfig:
    def test_opens(self, bundled_config: Path) -> None:
        assert ConfigSource().open(bundled_config)

    def test_every_axis_has_a_section(self, bundled_config: Path) -> None:
        src = ConfigSource()
        src.open(bundled_config)
        axes = src.find("AXES", "TRAJ", ValueKind.INT)
        assert axes > 0
        for joint in range(axes):
            assert f"JOINT_{joint}" in src.sections()

    def test_comp_files_exist(self, bundled_config: Path) -> None:
        src = ConfigSource()
        src.open(bundled_config)
        for section in src.sections():
            comp = src.find("COMP_FILE", section)
            if comp is not None:
                assert (bundled_config.parent / comp).is_file()
