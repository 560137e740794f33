"""Thin wrappers around single AWS service calls."""
