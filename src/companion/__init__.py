"""School Companion - curriculum-grounded study helper for CBSE classes 5-7."""

__version__ = "0.1.0"
