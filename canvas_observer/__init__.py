"""canvas-observer: stroke classification and vision-observation scheduling for a tutoring canvas."""

__version__ = "0.1.0"
