"""Command line interface for replaygraph."""
