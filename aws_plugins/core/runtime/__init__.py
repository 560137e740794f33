"""Check registry and execution."""
