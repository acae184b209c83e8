"""Shared hex and number helpers."""
