"""CLI commands for science rewards."""
