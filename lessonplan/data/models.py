"""
Pydantic models for the lesson planning data model.

Curriculum hierarchy:
- Course -> Topic -> SubTopic -> Lesson
- Lessons hang either directly off a Topic or off one of its SubTopics
- Standards belong to a Topic and link to lessons through LessonStandard rows

Scheduling:
- A ScheduleConfiguration owns the period assignments for a date range
- A Schedule owns the generated events and the special days of one configuration

Dates are ``datetime.date``; weekdays are ``Weekday`` members.
"""

from __future__ import annotations

import datetime as dt
from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)

from .days import (
    DEFAULT_TEACHING_DAYS,
    Weekday,
    lookup_weekday,
    parse_teaching_days,
    sort_weekdays,
    split_day_names,
)


# =============================================================================
# Constants and Enums
# =============================================================================

MAX_PERIODS_PER_DAY = 10
DEFAULT_BACKGROUND_COLOR = "#2196F3"
DEFAULT_FONT_COLOR = "#FFFFFF"

OVERFLOW_ERROR = "OverflowError"
UNDERFLOW_ERROR = "UnderflowError"
ERROR_EVENT_TYPES = (OVERFLOW_ERROR, UNDERFLOW_ERROR)
LESSON_EVENT_TYPE = "Lesson"


class FixedPeriodType(str, Enum):
    """Non-course duty that can fill a period."""
    LUNCH = "Lunch"
    HALL_DUTY = "HallDuty"
    CAFETERIA_DUTY = "CafeteriaDuty"
    STUDY_HALL = "StudyHall"
    PREP = "Prep"
    OTHER_DUTY = "OtherDuty"

    @property
    def sentinel_id(self) -> int:
        """Legacy negative course id for this duty (-1 to -6)."""
        return _DUTY_SENTINELS[self]

    @property
    def display_name(self) -> str:
        return _DUTY_DISPLAY_NAMES[self]

    @classmethod
    def from_sentinel_id(cls, value: int) -> FixedPeriodType:
        """
        Map a legacy negative course id back to a duty.

        Raises:
            ValueError: If the id is not one of the known sentinels
        """
        for duty, sentinel in _DUTY_SENTINELS.items():
            if sentinel == value:
                return duty
        raise ValueError(f"Unknown special period id: {value}")

    @classmethod
    def is_sentinel_id(cls, value: int) -> bool:
        return value in _DUTY_SENTINELS.values()


_DUTY_SENTINELS: dict[FixedPeriodType, int] = {
    duty: -(i + 1) for i, duty in enumerate(FixedPeriodType)
}

_DUTY_DISPLAY_NAMES: dict[FixedPeriodType, str] = {
    FixedPeriodType.LUNCH: "Lunch",
    FixedPeriodType.HALL_DUTY: "Hall Duty",
    FixedPeriodType.CAFETERIA_DUTY: "Cafeteria Duty",
    FixedPeriodType.STUDY_HALL: "Study Hall",
    FixedPeriodType.PREP: "Teacher Prep",
    FixedPeriodType.OTHER_DUTY: "Other Duty",
}


class SpecialDayType(str, Enum):
    """Whole-day or partial-day event that displaces regular periods."""
    ASSEMBLY = "Assembly"
    TESTING = "Testing"
    HOLIDAY = "Holiday"
    PROFESSIONAL_DEVELOPMENT = "ProfessionalDevelopment"
    FIELD_TRIP = "FieldTrip"
    WEATHER_DELAY = "WeatherDelay"
    EARLY_DISMISSAL = "EarlyDismissal"


class EventCategory(str, Enum):
    """Category of a generated schedule event. Error sentinels have none."""
    LESSON = "Lesson"
    SPECIAL_PERIOD = "SpecialPeriod"
    SPECIAL_DAY = "SpecialDay"


# Type aliases for documentation
PeriodNumber = Annotated[int, Field(ge=1, le=MAX_PERIODS_PER_DAY, description="Period number (1-10)")]
HexColor = Annotated[str, Field(pattern=r"^#[0-9A-Fa-f]{6}$", description="Hex color")]


# =============================================================================
# Event Type Helpers
# =============================================================================

def is_valid_event_type(event_type: str, category: Optional[EventCategory]) -> bool:
    """Check that an event type is allowed for its category."""
    if category is None:
        return event_type in ERROR_EVENT_TYPES
    if category == EventCategory.LESSON:
        return event_type == LESSON_EVENT_TYPE
    if category == EventCategory.SPECIAL_PERIOD:
        return event_type in {d.value for d in FixedPeriodType}
    if category == EventCategory.SPECIAL_DAY:
        return event_type in {d.value for d in SpecialDayType}
    return False


def valid_event_types(category: Optional[EventCategory]) -> list[str]:
    """Event types allowed for a category."""
    if category is None:
        return list(ERROR_EVENT_TYPES)
    if category == EventCategory.LESSON:
        return [LESSON_EVENT_TYPE]
    if category == EventCategory.SPECIAL_PERIOD:
        return [d.value for d in FixedPeriodType]
    return [d.value for d in SpecialDayType]


# =============================================================================
# Period Assignment Models
# =============================================================================

class CourseTarget(BaseModel):
    """Period assigned to a course."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["course"] = "course"
    course_id: int = Field(gt=0, description="Course ID")

    @property
    def label(self) -> str:
        return f"Course {self.course_id}"


class DutyTarget(BaseModel):
    """Period assigned to a fixed duty."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["duty"] = "duty"
    duty: FixedPeriodType = Field(description="Duty type")

    @property
    def label(self) -> str:
        return self.duty.value


PeriodTarget = Annotated[Union[CourseTarget, DutyTarget], Field(discriminator="kind")]


class PeriodAssignment(BaseModel):
    """
    What happens during one numbered period of a configuration.

    ``teaching_days`` keeps the names exactly as submitted so that the
    period assignment validator can report malformed values; use
    ``weekdays()`` for the parsed set. It defaults to empty, which the
    validator reports.

    Legacy input with ``course_id`` (negative ids meaning a duty) or
    ``special_period_type`` is converted into ``target``.
    """
    model_config = ConfigDict(extra="forbid")

    id: Optional[int] = Field(default=None, description="Unique identifier")
    period: PeriodNumber
    target: PeriodTarget
    teaching_days: list[str] = Field(default_factory=list, description="Day names this assignment covers")
    room: Optional[str] = Field(default=None, max_length=50, description="Room")
    notes: Optional[str] = Field(default=None, max_length=500, description="Free-text notes")
    background_color: HexColor = DEFAULT_BACKGROUND_COLOR
    font_color: HexColor = DEFAULT_FONT_COLOR

    @model_validator(mode="before")
    @classmethod
    def convert_legacy_target(cls, data: Any) -> Any:
        """Build ``target`` from ``course_id`` / ``special_period_type``."""
        if not isinstance(data, dict) or "target" in data:
            return data
        data = dict(data)
        course_id = data.pop("course_id", None)
        special = data.pop("special_period_type", None)

        if course_id is not None and special:
            raise ValueError("Assignment cannot have both a course and a special period type")
        if special:
            data["target"] = {"kind": "duty", "duty": special}
        elif course_id is not None:
            if course_id < 0:
                data["target"] = {"kind": "duty", "duty": FixedPeriodType.from_sentinel_id(course_id)}
            else:
                data["target"] = {"kind": "course", "course_id": course_id}
        return data

    @field_validator("teaching_days", mode="before")
    @classmethod
    def split_comma_string(cls, value: Any) -> Any:
        """Accept "Monday,Wednesday" as well as a list of names."""
        if isinstance(value, str):
            return value.split(",")
        if isinstance(value, (list, tuple)):
            return [v.value if isinstance(v, Weekday) else v for v in value]
        return value

    @property
    def course_id(self) -> Optional[int]:
        return self.target.course_id if isinstance(self.target, CourseTarget) else None

    @property
    def duty(self) -> Optional[FixedPeriodType]:
        return self.target.duty if isinstance(self.target, DutyTarget) else None

    @property
    def is_course(self) -> bool:
        return isinstance(self.target, CourseTarget)

    @property
    def label(self) -> str:
        """Human label used in conflict messages ("Course 12" or "Lunch")."""
        return self.target.label

    @property
    def legacy_course_id(self) -> int:
        """Course id, or the duty's negative sentinel id."""
        if isinstance(self.target, CourseTarget):
            return self.target.course_id
        return self.target.duty.sentinel_id

    def weekdays(self) -> frozenset[Weekday]:
        """Parsed teaching days. Blank and unknown names are skipped."""
        days = (lookup_weekday(n) for n in split_day_names(self.teaching_days))
        return frozenset(d for d in days if d is not None)

    def covers(self, day: Weekday) -> bool:
        return day in self.weekdays()

    def __str__(self) -> str:
        return f"Period {self.period}: {self.label}"


# =============================================================================
# Schedule Configuration
# =============================================================================

class ScheduleConfiguration(BaseModel):
    """
    Period configuration for a date range.

    ``school_year`` is derived from the dates on every read and is never
    accepted as input.
    """
    model_config = ConfigDict(extra="forbid")

    id: Optional[int] = Field(default=None, description="Unique identifier")
    user_id: int = Field(description="Owning user")
    title: str = Field(default="", max_length=100, description="Display title")
    start_date: date = Field(description="First day of the range")
    end_date: date = Field(description="Last day of the range (inclusive)")
    periods_per_day: int = Field(default=6, ge=1, le=MAX_PERIODS_PER_DAY, description="Periods per day")
    teaching_days: list[Weekday] = Field(
        default_factory=lambda: list(DEFAULT_TEACHING_DAYS),
        min_length=1,
        description="Master set of days instruction happens on",
    )
    is_active: bool = Field(default=False, description="Current active configuration")
    is_template: bool = Field(default=False, description="Usable as a copy source")
    created_at: Optional[datetime] = Field(default=None, description="Creation time")
    updated_at: Optional[datetime] = Field(default=None, description="Last update time")
    period_assignments: list[PeriodAssignment] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def drop_school_year(cls, data: Any) -> Any:
        """The label is derived; any submitted value is discarded."""
        if isinstance(data, dict) and "school_year" in data:
            data = {k: v for k, v in data.items() if k != "school_year"}
        return data

    @field_validator("teaching_days", mode="before")
    @classmethod
    def parse_days(cls, value: Any) -> Any:
        """Accept a comma string or names in any case; store canonically."""
        if value is None:
            return value
        return parse_teaching_days(value)

    @model_validator(mode="after")
    def validate_date_range(self) -> "ScheduleConfiguration":
        """Ensure start date is before end date."""
        if self.start_date >= self.end_date:
            raise ValueError(
                f"start_date ({self.start_date}) must be before end_date ({self.end_date})"
            )
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def school_year(self) -> str:
        from lessonplan.scheduling.school_year import compute_school_year_label
        return compute_school_year_label(self.start_date, self.end_date)

    @property
    def teaching_day_set(self) -> frozenset[Weekday]:
        return frozenset(self.teaching_days)

    def is_teaching_day(self, value: date) -> bool:
        return Weekday.from_date(value) in self.teaching_day_set

    def assignments_for_period(self, period: int) -> list[PeriodAssignment]:
        return [a for a in self.period_assignments if a.period == period]

    def course_ids(self) -> list[int]:
        """Distinct course ids in assignment order."""
        seen: list[int] = []
        for assignment in self.period_assignments:
            if assignment.course_id is not None and assignment.course_id not in seen:
                seen.append(assignment.course_id)
        return seen

    def overlaps(self, other: "ScheduleConfiguration") -> bool:
        """Whether the two date ranges share at least one day."""
        return self.start_date <= other.end_date and other.start_date <= self.end_date

    def is_complete(self) -> bool:
        """
        Whether every period 1..periods_per_day is covered on every
        configured teaching day.
        """
        for period in range(1, self.periods_per_day + 1):
            covered: set[Weekday] = set()
            for assignment in self.assignments_for_period(period):
                covered |= assignment.weekdays()
            if not self.teaching_day_set <= covered:
                return False
        return True

    def __str__(self) -> str:
        return f"{self.title or 'Configuration'} ({self.school_year})"


# =============================================================================
# Curriculum Models
# =============================================================================

class Course(BaseModel):
    """Course owned by a teacher."""
    model_config = ConfigDict(extra="forbid")

    id: int = Field(gt=0, description="Unique identifier")
    user_id: int = Field(default=0, description="Owning user")
    title: str = Field(min_length=1, description="Course title")
    description: Optional[str] = None
    archived: bool = False

    def __str__(self) -> str:
        return self.title


class Topic(BaseModel):
    """Top-level unit of a course."""
    model_config = ConfigDict(extra="forbid")

    id: int = Field(gt=0, description="Unique identifier")
    course_id: int = Field(description="Parent course")
    title: str = Field(min_length=1)
    description: Optional[str] = None
    sort_order: int = Field(default=0, description="Position within the course")
    archived: bool = False


class SubTopic(BaseModel):
    """Optional grouping of lessons inside a topic."""
    model_config = ConfigDict(extra="forbid")

    id: int = Field(gt=0, description="Unique identifier")
    topic_id: int = Field(description="Parent topic")
    title: str = Field(min_length=1)
    description: Optional[str] = None
    sort_order: int = Field(default=0, description="Position within the topic")
    is_default: bool = False
    archived: bool = False


class Lesson(BaseModel):
    """Single lesson. Belongs to exactly one of a topic or a subtopic."""
    model_config = ConfigDict(extra="forbid")

    id: int = Field(gt=0, description="Unique identifier")
    title: str = Field(min_length=1)
    objective: str = ""
    topic_id: Optional[int] = Field(default=None, description="Parent topic for direct lessons")
    sub_topic_id: Optional[int] = Field(default=None, description="Parent subtopic")
    sort_order: int = Field(default=0, description="Position within its container")
    materials: Optional[str] = None
    methods: Optional[str] = None
    assessment: Optional[str] = None
    archived: bool = False

    @model_validator(mode="after")
    def validate_parent(self) -> "Lesson":
        """Exactly one parent must be set."""
        if (self.topic_id is None) == (self.sub_topic_id is None):
            raise ValueError(
                f"Lesson {self.id} must belong to exactly one of a topic or a subtopic"
            )
        return self

    def __str__(self) -> str:
        return f"Lesson {self.id}: {self.title}"


class Standard(BaseModel):
    """Curriculum standard attached to lessons."""
    model_config = ConfigDict(extra="forbid")

    id: int = Field(gt=0)
    topic_id: int
    title: str = Field(min_length=1)
    description: Optional[str] = None
    standard_type: Optional[str] = None


class LessonStandard(BaseModel):
    """Join row between a lesson and a standard."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    lesson_id: int
    standard_id: int


class Note(BaseModel):
    """Free-text note attached to one curriculum entity."""
    model_config = ConfigDict(extra="forbid")

    id: int = Field(gt=0)
    content: str
    course_id: Optional[int] = None
    topic_id: Optional[int] = None
    sub_topic_id: Optional[int] = None
    lesson_id: Optional[int] = None

    @model_validator(mode="after")
    def validate_parent(self) -> "Note":
        parents = [self.course_id, self.topic_id, self.sub_topic_id, self.lesson_id]
        if sum(p is not None for p in parents) != 1:
            raise ValueError(f"Note {self.id} must be attached to exactly one entity")
        return self


class Curriculum(BaseModel):
    """A complete curriculum tree, as loaded from a file."""
    model_config = ConfigDict(extra="forbid")

    courses: list[Course] = Field(default_factory=list)
    topics: list[Topic] = Field(default_factory=list)
    sub_topics: list[SubTopic] = Field(default_factory=list)
    lessons: list[Lesson] = Field(default_factory=list)
    standards: list[Standard] = Field(default_factory=list)
    lesson_standards: list[LessonStandard] = Field(default_factory=list)
    notes: list[Note] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_references(self) -> "Curriculum":
        """Validate parent references and duplicate ids."""
        errors: list[str] = []

        def check_duplicates(items: list, entity_name: str) -> set[int]:
            seen: set[int] = set()
            for item in items:
                if item.id in seen:
                    errors.append(f"Duplicate {entity_name} ID: {item.id}")
                seen.add(item.id)
            return seen

        course_ids = check_duplicates(self.courses, "course")
        topic_ids = check_duplicates(self.topics, "topic")
        sub_topic_ids = check_duplicates(self.sub_topics, "subtopic")
        lesson_ids = check_duplicates(self.lessons, "lesson")
        standard_ids = check_duplicates(self.standards, "standard")
        check_duplicates(self.notes, "note")

        for topic in self.topics:
            if topic.course_id not in course_ids:
                errors.append(f"Topic {topic.id}: unknown course_id {topic.course_id}")
        for sub_topic in self.sub_topics:
            if sub_topic.topic_id not in topic_ids:
                errors.append(f"SubTopic {sub_topic.id}: unknown topic_id {sub_topic.topic_id}")
        for lesson in self.lessons:
            if lesson.topic_id is not None and lesson.topic_id not in topic_ids:
                errors.append(f"Lesson {lesson.id}: unknown topic_id {lesson.topic_id}")
            if lesson.sub_topic_id is not None and lesson.sub_topic_id not in sub_topic_ids:
                errors.append(f"Lesson {lesson.id}: unknown sub_topic_id {lesson.sub_topic_id}")
        for standard in self.standards:
            if standard.topic_id not in topic_ids:
                errors.append(f"Standard {standard.id}: unknown topic_id {standard.topic_id}")
        for link in self.lesson_standards:
            if link.lesson_id not in lesson_ids:
                errors.append(f"LessonStandard: unknown lesson_id {link.lesson_id}")
            if link.standard_id not in standard_ids:
                errors.append(f"LessonStandard: unknown standard_id {link.standard_id}")

        if errors:
            raise ValueError("Reference validation failed:\n" + "\n".join(f"  - {e}" for e in errors))
        return self

    def summary(self) -> dict[str, int]:
        return {
            "courses": len(self.courses),
            "topics": len(self.topics),
            "sub_topics": len(self.sub_topics),
            "lessons": len(self.lessons),
            "standards": len(self.standards),
            "notes": len(self.notes),
        }


# =============================================================================
# Schedule Models
# =============================================================================

class SpecialDay(BaseModel):
    """Event that replaces the given periods on one date."""
    model_config = ConfigDict(extra="forbid")

    id: Optional[int] = Field(default=None, description="Unique identifier")
    schedule_id: Optional[int] = Field(default=None, description="Owning schedule")
    date: dt.date
    periods: list[PeriodNumber] = Field(min_length=1, description="Periods affected")
    event_type: SpecialDayType
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    background_color: Optional[HexColor] = None
    font_color: Optional[HexColor] = None

    def covers(self, value: date, period: int) -> bool:
        return self.date == value and period in self.periods


class ScheduleEvent(BaseModel):
    """
    One generated (date, period) record.

    References a lesson, a duty, a special day, or is an error sentinel
    (``OverflowError`` / ``UnderflowError``) with no category.
    """
    model_config = ConfigDict(extra="forbid")

    id: Optional[int] = None
    schedule_id: Optional[int] = None
    date: dt.date
    period: PeriodNumber
    course_id: Optional[int] = None
    lesson_id: Optional[int] = None
    special_day_id: Optional[int] = None
    event_type: str
    event_category: Optional[EventCategory] = None
    title: Optional[str] = Field(default=None, description="Lesson or special day title")
    comment: Optional[str] = Field(default=None, max_length=1000)
    schedule_sort: int = Field(default=0, description="Position in the course lesson sequence")

    @model_validator(mode="after")
    def validate_event_type(self) -> "ScheduleEvent":
        """Event type must belong to the event category."""
        if not is_valid_event_type(self.event_type, self.event_category):
            category = self.event_category.value if self.event_category else "None"
            raise ValueError(
                f"Invalid event type '{self.event_type}' for category '{category}'. "
                f"Valid types: {', '.join(valid_event_types(self.event_category))}"
            )
        return self

    @property
    def is_error(self) -> bool:
        return self.event_category is None

    @property
    def is_lesson(self) -> bool:
        return self.event_category == EventCategory.LESSON

    @property
    def slot(self) -> tuple[date, int]:
        return (self.date, self.period)


class Schedule(BaseModel):
    """Generated schedule for one configuration."""
    model_config = ConfigDict(extra="forbid")

    id: Optional[int] = None
    user_id: int
    configuration_id: int
    title: str = Field(default="", max_length=100)
    is_locked: bool = False
    created_at: Optional[datetime] = None
    events: list[ScheduleEvent] = Field(default_factory=list)
    special_days: list[SpecialDay] = Field(default_factory=list)

    def events_for_period(self, period: int) -> list[ScheduleEvent]:
        return [e for e in self.events if e.period == period]


__all__ = [
    "MAX_PERIODS_PER_DAY",
    "OVERFLOW_ERROR",
    "UNDERFLOW_ERROR",
    "LESSON_EVENT_TYPE",
    "Weekday",
    "FixedPeriodType",
    "SpecialDayType",
    "EventCategory",
    "CourseTarget",
    "DutyTarget",
    "PeriodAssignment",
    "ScheduleConfiguration",
    "Course",
    "Topic",
    "SubTopic",
    "Lesson",
    "Standard",
    "LessonStandard",
    "Note",
    "Curriculum",
    "SpecialDay",
    "ScheduleEvent",
    "Schedule",
    "is_valid_event_type",
    "valid_event_types",
    "sort_weekdays",
]
