"""HTTP adapter package.

Architectural role:
- Defines the external HTTP boundary of the service.
- Performs transport-level validation and response shaping.
- Delegates provider calls to the `geminiapi.llm` layer.
"""
