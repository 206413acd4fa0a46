"""Textual front end for physna-tui."""
