"""Textual front-end for interactive play."""

from .app import CrazyEightsApp, run_textual_app

__all__ = ["CrazyEightsApp", "run_textual_app"]
