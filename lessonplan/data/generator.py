"""
Sample data generator for demos and tests.

Generates a curriculum (courses, topics, subtopics, lessons, standards) and
a complete, valid schedule configuration that uses it.

Usage:
    from lessonplan.data.generator import generate_sample_data, GeneratorConfig

    curriculum, configuration = generate_sample_data(GeneratorConfig(seed=42))
"""

from __future__ import annotations

import json
import random
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Optional, Union

from .days import DEFAULT_TEACHING_DAYS, Weekday
from .models import (
    Course,
    CourseTarget,
    Curriculum,
    DutyTarget,
    FixedPeriodType,
    Lesson,
    LessonStandard,
    PeriodAssignment,
    ScheduleConfiguration,
    Standard,
    SubTopic,
    Topic,
)


# =============================================================================
# Course Catalogue
# =============================================================================

COURSE_CATALOGUE = [
    ("Algebra I", ["Linear Equations", "Inequalities", "Functions", "Systems of Equations", "Polynomials"]),
    ("Biology", ["Cells", "Genetics", "Evolution", "Ecology", "Human Body"]),
    ("World History", ["Ancient Civilizations", "Middle Ages", "Renaissance", "Industrial Revolution", "Modern Era"]),
    ("English Literature", ["Poetry", "Short Stories", "Drama", "The Novel", "Essay Writing"]),
    ("Chemistry", ["Atoms", "Bonding", "Reactions", "Stoichiometry", "Acids and Bases"]),
    ("Geography", ["Maps", "Climate", "Population", "Resources", "Urbanization"]),
]

LESSON_VERBS = ["Introduction to", "Exploring", "Practice:", "Applying", "Review:", "Assessment:"]

STANDARD_TYPES = ["Common Core", "State", "NGSS"]


# =============================================================================
# Generator Configuration
# =============================================================================

@dataclass
class GeneratorConfig:
    """Configuration for sample data generation.

    The generated configuration always validates: every period covers every
    teaching day exactly once.
    """
    # Curriculum size
    num_courses: int = 3
    topics_per_course: int = 3
    max_sub_topics_per_topic: int = 2
    min_lessons_per_container: int = 2
    max_lessons_per_container: int = 4
    archived_lesson_ratio: float = 0.1

    # Configuration layout
    user_id: int = 1
    title: str = "Sample Teaching Schedule"
    start_date: date = field(default_factory=lambda: date(2024, 9, 2))
    end_date: date = field(default_factory=lambda: date(2025, 6, 13))
    periods_per_day: int = 6
    teaching_days: list[Weekday] = field(default_factory=lambda: list(DEFAULT_TEACHING_DAYS))
    lunch_period: Optional[int] = 4
    prep_period: Optional[int] = 6
    split_period: Optional[int] = 2  # Two courses share this period on alternating days

    # Randomization
    seed: Optional[int] = None


# =============================================================================
# Generator Functions
# =============================================================================

def generate_sample_data(config: GeneratorConfig | None = None) -> tuple[Curriculum, ScheduleConfiguration]:
    """
    Generate a curriculum and a configuration that teaches it.

    Args:
        config: Generator configuration (uses defaults if None)

    Returns:
        (curriculum, configuration)
    """
    if config is None:
        config = GeneratorConfig()
    rng = random.Random(config.seed)

    curriculum = generate_sample_curriculum(config, rng)
    configuration = generate_sample_configuration([c.id for c in curriculum.courses], config)
    return curriculum, configuration


def generate_sample_curriculum(
    config: GeneratorConfig | None = None,
    rng: Optional[random.Random] = None,
) -> Curriculum:
    """Generate a curriculum tree with sequential ids."""
    if config is None:
        config = GeneratorConfig()
    if rng is None:
        rng = random.Random(config.seed)

    courses: list[Course] = []
    topics: list[Topic] = []
    sub_topics: list[SubTopic] = []
    lessons: list[Lesson] = []
    standards: list[Standard] = []
    links: list[LessonStandard] = []

    for course_index in range(config.num_courses):
        title, topic_titles = COURSE_CATALOGUE[course_index % len(COURSE_CATALOGUE)]
        course = Course(id=course_index + 1, user_id=config.user_id, title=title)
        courses.append(course)

        for topic_order in range(config.topics_per_course):
            topic = Topic(
                id=len(topics) + 1,
                course_id=course.id,
                title=topic_titles[topic_order % len(topic_titles)],
                sort_order=topic_order,
            )
            topics.append(topic)

            standard = Standard(
                id=len(standards) + 1,
                topic_id=topic.id,
                title=f"{course.title} {topic_order + 1}.{rng.randint(1, 9)}",
                standard_type=rng.choice(STANDARD_TYPES),
            )
            standards.append(standard)

            for order in range(_lesson_count(config, rng)):
                lesson = _make_lesson(len(lessons) + 1, topic.title, order, config, rng, topic_id=topic.id)
                lessons.append(lesson)
                links.append(LessonStandard(lesson_id=lesson.id, standard_id=standard.id))

            for sub_order in range(rng.randint(0, config.max_sub_topics_per_topic)):
                sub_topic = SubTopic(
                    id=len(sub_topics) + 1,
                    topic_id=topic.id,
                    title=f"{topic.title} Part {sub_order + 1}",
                    sort_order=sub_order,
                )
                sub_topics.append(sub_topic)
                for order in range(_lesson_count(config, rng)):
                    lessons.append(
                        _make_lesson(len(lessons) + 1, sub_topic.title, order, config, rng,
                                     sub_topic_id=sub_topic.id)
                    )

    return Curriculum(
        courses=courses,
        topics=topics,
        sub_topics=sub_topics,
        lessons=lessons,
        standards=standards,
        lesson_standards=links,
    )


def generate_sample_configuration(
    course_ids: list[int],
    config: GeneratorConfig | None = None,
) -> ScheduleConfiguration:
    """
    Build a configuration with full, conflict-free coverage.

    Duty periods get Lunch and Prep; the split period alternates two
    courses (Mon/Wed/Fri and Tue/Thu style); every other period takes the
    next course round-robin.
    """
    if config is None:
        config = GeneratorConfig()
    if not course_ids:
        raise ValueError("At least one course is required")

    days = [d.value for d in config.teaching_days]
    assignments: list[PeriodAssignment] = []
    next_course = 0

    for period in range(1, config.periods_per_day + 1):
        if period == config.lunch_period:
            assignments.append(
                PeriodAssignment(period=period, target=DutyTarget(duty=FixedPeriodType.LUNCH),
                                 teaching_days=days, background_color="#FF9800")
            )
        elif period == config.prep_period:
            assignments.append(
                PeriodAssignment(period=period, target=DutyTarget(duty=FixedPeriodType.PREP),
                                 teaching_days=days, background_color="#9E9E9E")
            )
        elif period == config.split_period and len(course_ids) > 1 and len(days) > 1:
            first = course_ids[next_course % len(course_ids)]
            second = course_ids[(next_course + 1) % len(course_ids)]
            next_course += 2
            assignments.append(
                PeriodAssignment(period=period, target=CourseTarget(course_id=first),
                                 teaching_days=days[0::2], room=f"Room {100 + period}")
            )
            assignments.append(
                PeriodAssignment(period=period, target=CourseTarget(course_id=second),
                                 teaching_days=days[1::2], room=f"Room {100 + period}")
            )
        else:
            course_id = course_ids[next_course % len(course_ids)]
            next_course += 1
            assignments.append(
                PeriodAssignment(period=period, target=CourseTarget(course_id=course_id),
                                 teaching_days=days, room=f"Room {100 + period}")
            )

    return ScheduleConfiguration(
        user_id=config.user_id,
        title=config.title,
        start_date=config.start_date,
        end_date=config.end_date,
        periods_per_day=config.periods_per_day,
        teaching_days=config.teaching_days,
        period_assignments=assignments,
    )


def _lesson_count(config: GeneratorConfig, rng: random.Random) -> int:
    return rng.randint(config.min_lessons_per_container, config.max_lessons_per_container)


def _make_lesson(
    lesson_id: int,
    container_title: str,
    order: int,
    config: GeneratorConfig,
    rng: random.Random,
    topic_id: Optional[int] = None,
    sub_topic_id: Optional[int] = None,
) -> Lesson:
    verb = LESSON_VERBS[order % len(LESSON_VERBS)]
    return Lesson(
        id=lesson_id,
        title=f"{verb} {container_title}",
        objective=f"Students will be able to explain key ideas of {container_title.lower()}.",
        topic_id=topic_id,
        sub_topic_id=sub_topic_id,
        sort_order=order,
        archived=rng.random() < config.archived_lesson_ratio,
    )


# =============================================================================
# Utility Functions
# =============================================================================

def save_sample_data(
    curriculum: Curriculum,
    configuration: ScheduleConfiguration,
    directory: Union[str, Path],
) -> tuple[Path, Path]:
    """
    Write ``configuration.json`` and ``curriculum.json`` with camelCase keys.

    Returns:
        (configuration_path, curriculum_path)
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    config_data = configuration.model_dump(
        mode="json", exclude={"id", "created_at", "updated_at", "school_year"}, exclude_none=True,
    )
    config_path = directory / "configuration.json"
    with open(config_path, "w") as f:
        json.dump(_convert_keys_to_camel_case(config_data), f, indent=2)

    curriculum_path = directory / "curriculum.json"
    with open(curriculum_path, "w") as f:
        json.dump(_convert_keys_to_camel_case(curriculum.model_dump(mode="json", exclude_none=True)), f, indent=2)

    return config_path, curriculum_path


def _convert_keys_to_camel_case(obj):
    """Recursively convert dictionary keys from snake_case to camelCase."""
    def to_camel_case(name: str) -> str:
        head, *rest = name.split("_")
        return head + "".join(part.title() for part in rest)

    if isinstance(obj, dict):
        return {to_camel_case(k): _convert_keys_to_camel_case(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_convert_keys_to_camel_case(item) for item in obj]
    return obj


def get_generation_stats(curriculum: Curriculum, configuration: ScheduleConfiguration) -> dict:
    """Counts describing generated sample data."""
    active_lessons = [l for l in curriculum.lessons if not l.archived]
    return {
        **curriculum.summary(),
        "active_lessons": len(active_lessons),
        "archived_lessons": len(curriculum.lessons) - len(active_lessons),
        "periods_per_day": configuration.periods_per_day,
        "period_assignments": len(configuration.period_assignments),
        "course_assignments": sum(1 for a in configuration.period_assignments if a.is_course),
        "school_year": configuration.school_year,
        "is_complete": configuration.is_complete(),
    }
