"""Command line interface for twmerge."""
