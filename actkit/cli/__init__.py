"""Command-line interface for actkit."""
