"""Scheduling and booking lifecycle core for the companion marketplace."""

__version__ = "0.1.0"
