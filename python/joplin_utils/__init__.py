"""Shared helpers for the Joplin resource cleaner scripts."""
