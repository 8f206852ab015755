"""
Entry point for running the scheduler as a module.

Usage:
    python -m timetabler generate store.json --timetable 1
    python -m timetabler validate store.json
    python -m timetabler view store.json --timetable 1
"""

from timetabler.cli import main

if __name__ == "__main__":
    main()
