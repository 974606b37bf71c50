"""Shared assignment views for study groups."""
