"""Command-line interface for glacierctl."""
