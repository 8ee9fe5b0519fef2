"""Command-line interface for routefin."""
