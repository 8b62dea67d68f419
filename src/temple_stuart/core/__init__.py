"""Core infrastructure: database wiring and domain exceptions."""
