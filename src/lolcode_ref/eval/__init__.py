"""Evaluator helper modules for the LOLCODE runtime."""

__all__ = [
    "access",
    "bind",
    "blocks",
    "common",
    "control",
    "expr",
    "helpers",
    "io",
    "literals",
    "loops",
    "match",
]
