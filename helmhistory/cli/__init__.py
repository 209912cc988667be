"""Command line interface for helmhistory."""
