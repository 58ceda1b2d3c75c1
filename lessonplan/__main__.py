"""
Entry point for running lessonplan as a module.

Usage:
    python -m lessonplan validate configuration.json
    python -m lessonplan generate configuration.json curriculum.json -o schedule.json
    python -m lessonplan label 2024-08-26 2025-06-13
"""

from lessonplan.cli import main

if __name__ == "__main__":
    main()
