"""Transport-independent models and contracts."""
