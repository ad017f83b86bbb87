"""Personal journaling API: diary entries, moods, habits, media and period insights."""

__version__ = "0.1.0"
