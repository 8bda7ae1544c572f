"""Shared contracts for the generation facade.

Composition:
    - `errors`: startup and per-request error taxonomy.
    - `generation_types`: generation modes, request value, content part builders.
"""
