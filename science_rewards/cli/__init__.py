"""Command-line interface for science rewards."""
