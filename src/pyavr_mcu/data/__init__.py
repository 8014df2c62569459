"""Embedded data files (architecture table)."""
