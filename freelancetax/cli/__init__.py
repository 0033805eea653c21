"""Freelance Tax command-line interface."""
