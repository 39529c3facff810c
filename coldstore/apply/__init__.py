"""Purge date changes against live archives."""
