"""Domain layer — layers, policies, keys, and errors.

This layer depends only on stdlib.
It must never import from services, infrastructure, or config.
"""
