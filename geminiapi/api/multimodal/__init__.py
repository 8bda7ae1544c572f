"""Multimodal input handling for API adapters.

Scope:
- Reading and size-checking uploaded image parts. No endpoint definitions.
"""
