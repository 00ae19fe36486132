"""Admin dashboard core for weekly cohort grading."""

__version__ = "0.1.0"
