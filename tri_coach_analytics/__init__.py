"""Triathlon coaching analytics: periodized plans, training load and readiness."""

__version__ = "0.1.0"
