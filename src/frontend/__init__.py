"""Textual config panel for editing widget settings."""
