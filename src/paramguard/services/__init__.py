"""Service layer: the stateful Validation object and its result type.

Services may import from domain and config models.
They must never import from infrastructure.
"""
