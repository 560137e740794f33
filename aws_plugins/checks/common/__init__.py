"""Shared checker primitives."""
