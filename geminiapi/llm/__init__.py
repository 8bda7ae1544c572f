"""LLM access package.

Module split:
    - `provider_config`: environment-driven credential, port and model configuration.
    - `client`: long-lived provider session and `generateContent` transport.
    - `service`: mode dispatcher for text-only and text-plus-image generation.
"""
