"""Shared helpers for the artimap test suite."""
