"""Resume vs. job description compatibility analysis."""

__version__ = "0.1.0"
