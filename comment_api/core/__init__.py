"""Shared infrastructure for the comment API."""
