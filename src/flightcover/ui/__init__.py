"""Command line interface for flightcover."""
