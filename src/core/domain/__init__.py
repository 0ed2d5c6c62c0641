"""Domain models and entities.

Why:
- Pure, strict data structures (Pydantic v2) for pipelines, repositories and apps.
- The domain knows nothing about HTTP, the CLI or prompts.
"""
