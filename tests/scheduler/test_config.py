"""Tests for configuration loading."""

import json

import pytest

from timetable_generator.exceptions import ConfigError
from timetable_generator.scheduler.config import (
    ConfigLoader,
    SettingsConfig,
    StaffConfig,
    SubjectConfig,
)


@pytest.fixture
def config_dir(tmp_path):
    (tmp_path / "settings.json").write_text(
        json.dumps(
            {
                "periodTimings": ["9:00-10:00", "10:00-11:00", "11:00-12:00", "1:00-2:00"],
                "breaks": [{"name": "Lunch Break", "after": 3}],
                "hardConstraints": {"noTeacherOverlap": True},
            }
        ),
        encoding="utf-8",
    )
    (tmp_path / "subjects.json").write_text(
        json.dumps(
            {
                "subjects": [
                    {"id": "T1", "name": "Operating Systems", "shortName": "OS", "periodsPerWeek": 4, "staffId": "S1"},
                    {"id": "L1", "name": "OS Lab", "shortName": "OSL", "periodsPerWeek": 2, "staffId": "S2", "isLab": True},
                ]
            }
        ),
        encoding="utf-8",
    )
    (tmp_path / "staff.csv").write_text(
        "id,name,email,max_periods_per_day\n"
        "S1,Dr. Kumar,kumar@example.edu,4\n"
        "S2,Prof. Rao,,\n",
        encoding="utf-8",
    )
    return tmp_path


class TestSettingsConfig:
    def test_defaults_without_file(self):
        config = SettingsConfig(None)
        assert config.settings.periods_per_day == 7

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError):
            SettingsConfig(path)


class TestSubjectConfig:
    def test_csv(self, tmp_path):
        path = tmp_path / "subjects.csv"
        path.write_text(
            "id,name,short_name,periods_per_week,staff_id,is_lab,priority,code\n"
            "T1,Operating Systems,OS,4,S1,,1,CS301\n"
            "L1,OS Lab,OSL,3,S2,yes,,\n",
            encoding="utf-8",
        )
        config = SubjectConfig(path)

        assert [s.id for s in config.subjects] == ["T1", "L1"]
        assert config.get_subject("T1").code == "CS301"
        assert config.get_subject("T1").priority == 1
        assert [s.id for s in config.get_labs()] == ["L1"]
        assert config.total_periods() == 7

    def test_csv_bad_row(self, tmp_path):
        path = tmp_path / "subjects.csv"
        path.write_text("id,name,periods_per_week\nT1,OS,four\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="row 2"):
            SubjectConfig(path)

    def test_json_list(self, tmp_path):
        path = tmp_path / "subjects.json"
        path.write_text(
            json.dumps([{"id": "T1", "name": "OS", "periods_per_week": 3}]), encoding="utf-8"
        )
        assert SubjectConfig(path).get_subject("T1").periods_per_week == 3


class TestStaffConfig:
    def test_json(self, tmp_path):
        path = tmp_path / "staff.json"
        path.write_text(
            json.dumps({"staff": [{"id": "S1", "name": "Dr. Kumar", "maxPeriods": 5}]}),
            encoding="utf-8",
        )
        config = StaffConfig(path)
        assert config.get_staff("S1").max_periods_per_day == 5
        assert config.get_name("S1") == "Dr. Kumar"
        assert config.get_name("S9") == ""
        assert config.get_name(None) == ""


class TestConfigLoader:
    def test_loads_all_files(self, config_dir):
        config = ConfigLoader(config_dir)

        assert config.settings.settings.periods_per_day == 4
        assert config.settings.settings.breaks[0].after == 3
        assert [s.id for s in config.subjects.subjects] == ["T1", "L1"]
        assert config.subjects.get_subject("L1").is_lab
        assert config.staff.get_staff("S1").max_periods_per_day == 4
        assert config.staff.get_staff("S2").email is None

    def test_missing_directory(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            ConfigLoader(tmp_path / "missing")

    def test_no_subjects(self, tmp_path):
        with pytest.raises(ConfigError, match="no subjects"):
            ConfigLoader(tmp_path)
