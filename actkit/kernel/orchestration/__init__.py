"""Rule execution: runner, events and audit integration helpers."""
