"""In-process adapters."""
