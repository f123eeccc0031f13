"""Infrastructure layer — element tree, masking, HTTP transport.

This layer depends on stdlib and third-party libs (httpx).
It must never import from inputs, form, or plugins.
"""
