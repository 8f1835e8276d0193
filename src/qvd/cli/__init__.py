"""Command line interface for qvd."""
