"""Optimisation passes. Every module here registers itself with ``@optimization_pass``."""
