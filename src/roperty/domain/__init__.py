"""Domain layer — vectors, descriptor codec, records, values.

This layer depends only on the stdlib.
It must never import from services, infrastructure, commands, or config.
"""
