"""Orbit analysis helpers."""
