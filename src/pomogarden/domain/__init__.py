"""Domain layer — modes, garden items, placement rules, and text.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
