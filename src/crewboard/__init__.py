"""Crew scheduling calendar engine."""

__version__ = "0.1.0"
