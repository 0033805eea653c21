"""Freelance Tax - monthly tax estimates for self-employed individuals."""

__version__ = "0.3.0"
