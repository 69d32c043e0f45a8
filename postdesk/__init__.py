"""Postdesk — client-side post management core."""

__version__ = "0.1.0"
