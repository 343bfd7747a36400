"""Remote endpoint modules (internal)."""
