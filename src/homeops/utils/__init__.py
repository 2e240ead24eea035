"""Shared helpers for homeops."""
