"""Command line interface for cutplan."""
