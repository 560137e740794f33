"""AWS monitoring checks."""
