"""Domain layer — types, errors, and reply models.

This layer depends only on stdlib and pydantic.
It must never import from form, inputs, infrastructure, or plugins.
"""
