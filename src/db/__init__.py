"""Persistence for quiz records."""
