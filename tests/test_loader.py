"""Tests for loading configurations, curricula and special days."""

import json

import pytest

from lessonplan.data.days import Weekday
from lessonplan.data.loader import (
    convert_keys_to_snake_case,
    load_configuration,
    load_curriculum,
    load_special_days,
)
from lessonplan.data.models import FixedPeriodType, SpecialDayType
from lessonplan.errors import DataValidationError


@pytest.fixture
def config_data():
    """Minimal configuration in the camelCase file format."""
    return {
        "title": "2024-2025",
        "schoolYear": "Something Else",
        "startDate": "2024-08-26",
        "endDate": "2025-06-13",
        "periodsPerDay": 2,
        "teachingDays": "Monday,Tuesday,Wednesday,Thursday,Friday",
        "periodAssignments": [
            {"period": 1, "courseId": 1, "teachingDays": "Monday,Wednesday,Friday", "room": "101"},
            {"period": 1, "courseId": 2, "teachingDays": ["Tuesday", "Thursday"]},
            {"period": 2, "specialPeriodType": "Lunch"},
        ],
    }


@pytest.fixture
def curriculum_data():
    return {
        "courses": [{"id": 1, "title": "Algebra I"}],
        "topics": [{"id": 1, "courseId": 1, "title": "Linear Equations", "sortOrder": 0}],
        "subTopics": [{"id": 1, "topicId": 1, "title": "One-Step"}],
        "lessons": [
            {"id": 1, "title": "Introduction", "topicId": 1},
            {"id": 2, "title": "Addition", "subTopicId": 1, "sortOrder": 1},
        ],
        "standards": [{"id": 1, "topicId": 1, "title": "A.REI.1"}],
        "lessonStandards": [{"lessonId": 1, "standardId": 1}],
    }


def write_json(directory, name, data):
    path = directory / name
    path.write_text(json.dumps(data))
    return path


class TestLoadConfiguration:
    """Tests for load_configuration."""

    def test_load(self, tmp_path, config_data):
        config = load_configuration(write_json(tmp_path, "config.json", config_data))

        assert config.user_id == 1
        assert config.periods_per_day == 2
        assert config.teaching_days[0] == Weekday.MONDAY
        assert len(config.period_assignments) == 3
        assert config.period_assignments[0].course_id == 1
        assert config.period_assignments[0].room == "101"
        assert config.period_assignments[1].teaching_days == ["Tuesday", "Thursday"]
        assert config.period_assignments[2].duty == FixedPeriodType.LUNCH

    def test_school_year_is_derived(self, tmp_path, config_data):
        """A submitted schoolYear is replaced by the label from the dates."""
        config = load_configuration(write_json(tmp_path, "config.json", config_data))
        assert config.school_year == "2024-2025"

    def test_user_id(self, tmp_path, config_data):
        path = write_json(tmp_path, "config.json", config_data)
        assert load_configuration(path, user_id=7).user_id == 7

        config_data["userId"] = 3
        path = write_json(tmp_path, "config.json", config_data)
        assert load_configuration(path, user_id=7).user_id == 3

    def test_legacy_sentinel_course_id(self, tmp_path, config_data):
        config_data["periodAssignments"][2] = {"period": 2, "courseId": FixedPeriodType.PREP.sentinel_id}
        config = load_configuration(write_json(tmp_path, "config.json", config_data))
        assert config.period_assignments[2].duty == FixedPeriodType.PREP

    def test_tagged_target(self, tmp_path, config_data):
        config_data["periodAssignments"][2] = {"period": 2, "target": {"kind": "duty", "duty": "HallDuty"}}
        config = load_configuration(write_json(tmp_path, "config.json", config_data))
        assert config.period_assignments[2].duty == FixedPeriodType.HALL_DUTY

    def test_invalid_dates(self, tmp_path, config_data):
        config_data["endDate"] = "2024-08-01"
        with pytest.raises(DataValidationError, match="Invalid configuration"):
            load_configuration(write_json(tmp_path, "config.json", config_data))

    def test_errors_are_aggregated(self, tmp_path, config_data):
        config_data["periodsPerDay"] = 0
        config_data["periodAssignments"][0]["period"] = 0
        with pytest.raises(DataValidationError) as exc_info:
            load_configuration(write_json(tmp_path, "config.json", config_data))
        message = str(exc_info.value)
        assert "periods_per_day" in message
        assert "period_assignments.0.period" in message

    def test_not_an_object(self, tmp_path):
        with pytest.raises(DataValidationError, match="JSON object"):
            load_configuration(write_json(tmp_path, "config.json", [1, 2]))

    def test_missing_file(self, tmp_path):
        with pytest.raises(DataValidationError, match="File not found"):
            load_configuration(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{ not json")
        with pytest.raises(DataValidationError, match="Invalid JSON"):
            load_configuration(path)


class TestLoadCurriculum:
    """Tests for load_curriculum."""

    def test_load(self, tmp_path, curriculum_data):
        curriculum = load_curriculum(write_json(tmp_path, "curriculum.json", curriculum_data))
        assert curriculum.summary()["lessons"] == 2
        assert curriculum.lessons[1].sub_topic_id == 1
        assert curriculum.lesson_standards[0].standard_id == 1

    def test_unknown_reference(self, tmp_path, curriculum_data):
        curriculum_data["lessons"][0]["topicId"] = 9
        with pytest.raises(DataValidationError, match="unknown topic_id 9"):
            load_curriculum(write_json(tmp_path, "curriculum.json", curriculum_data))

    def test_duplicate_ids(self, tmp_path, curriculum_data):
        curriculum_data["courses"].append({"id": 1, "title": "Again"})
        with pytest.raises(DataValidationError, match="Duplicate"):
            load_curriculum(write_json(tmp_path, "curriculum.json", curriculum_data))


class TestLoadSpecialDays:
    """Tests for load_special_days."""

    DAY = {"date": "2024-11-28", "periods": [1, 2], "eventType": "Holiday", "title": "Thanksgiving"}

    def test_list(self, tmp_path):
        days = load_special_days(write_json(tmp_path, "special.json", [self.DAY]))
        assert len(days) == 1
        assert days[0].event_type == SpecialDayType.HOLIDAY
        assert days[0].periods == [1, 2]

    def test_object(self, tmp_path):
        days = load_special_days(write_json(tmp_path, "special.json", {"specialDays": [self.DAY]}))
        assert days[0].title == "Thanksgiving"

    def test_all_errors_reported(self, tmp_path):
        bad = [dict(self.DAY, eventType="Picnic"), dict(self.DAY, periods=[])]
        with pytest.raises(DataValidationError) as exc_info:
            load_special_days(write_json(tmp_path, "special.json", bad))
        message = str(exc_info.value)
        assert "special day 0" in message
        assert "special day 1" in message

    def test_not_a_list(self, tmp_path):
        with pytest.raises(DataValidationError, match="must contain a list"):
            load_special_days(write_json(tmp_path, "special.json", {"specialDays": 5}))


class TestKeyConversion:
    """Tests for camelCase key conversion."""

    def test_nested(self):
        data = {"periodAssignments": [{"teachingDays": "Monday", "backgroundColor": "#FFFFFF"}]}
        assert convert_keys_to_snake_case(data) == {
            "period_assignments": [{"teaching_days": "Monday", "background_color": "#FFFFFF"}]
        }

    def test_acronyms(self):
        assert convert_keys_to_snake_case({"HTTPServer": 1, "userID": 2}) == {
            "http_server": 1, "user_id": 2,
        }
