"""Command-line interface for quickref."""
