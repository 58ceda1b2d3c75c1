"""Domain models, weekday helpers and data loading."""

from .days import (
    DEFAULT_TEACHING_DAYS,
    Weekday,
    format_teaching_days,
    parse_teaching_days,
    parse_weekday,
)
from .loader import load_configuration, load_curriculum, load_special_days
from .generator import (
    GeneratorConfig,
    generate_sample_data,
    generate_sample_curriculum,
    generate_sample_configuration,
    save_sample_data,
    get_generation_stats,
)

__all__ = [
    # Days
    "DEFAULT_TEACHING_DAYS",
    "Weekday",
    "format_teaching_days",
    "parse_teaching_days",
    "parse_weekday",
    # Loader
    "load_configuration",
    "load_curriculum",
    "load_special_days",
    # Generator
    "GeneratorConfig",
    "generate_sample_data",
    "generate_sample_curriculum",
    "generate_sample_configuration",
    "save_sample_data",
    "get_generation_stats",
]
