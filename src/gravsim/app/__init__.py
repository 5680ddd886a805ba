"""Consumer-side helpers."""
