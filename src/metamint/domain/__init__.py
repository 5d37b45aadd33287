"""Domain layer — schema descriptors, status vocabulary, and error kinds.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
