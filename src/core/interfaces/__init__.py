"""Core interfaces.

Why:
- Declares the contracts (Protocol) that concrete adapters implement.
- Inverts dependencies: the orchestrator depends on abstractions, so tests can
  swap in fakes without any HTTP.
"""
