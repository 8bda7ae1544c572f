"""HTTP facade over the Gemini generative-language API.

Package split:
    - `core`: error taxonomy and generation request contracts.
    - `llm`: environment configuration, provider session, mode dispatcher.
    - `api`: HTTP adapter, request validation, process entrypoint.
"""
