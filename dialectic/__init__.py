"""Dialectic — dialogue games for acceptance in abstract argumentation."""

__version__ = "1.0.0"
