"""Runtime: check registry and runner."""
