"""Postdesk command line interface."""
