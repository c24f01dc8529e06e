"""Command line interface for korea-transit."""
