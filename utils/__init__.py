"""Shared logging, settings and messaging helpers."""
