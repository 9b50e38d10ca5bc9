"""Command line handlers for repolog."""
