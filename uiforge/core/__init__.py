"""Core utilities shared across uiforge packages."""
