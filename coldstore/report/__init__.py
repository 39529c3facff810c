"""Audit rows and CSV reports."""
