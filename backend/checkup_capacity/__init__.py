"""Capacity & availability engine for multi-tenant checkup centers."""

__version__ = "0.1.0"
