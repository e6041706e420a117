from .binding import Binding, Entity, EntityReference

__all__ = [
    "Binding",
    "Entity",
    "EntityReference",
]
