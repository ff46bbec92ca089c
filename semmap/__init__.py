"""Heuristic semantic maps of multi-language source repositories."""
