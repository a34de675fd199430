"""
Base building blocks:
identity and tenant scoping.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID, uuid4


def new_id() -> UUID:
    return uuid4()


@dataclass(eq=False, kw_only=True)
class Entity:
    """Internal identity exists immediately in the domain."""

    id: UUID = field(default_factory=new_id)


@dataclass(eq=False, kw_only=True)
class TenantScopedEntity(Entity):
    """An entity that lives inside exactly one tenant partition."""

    tenant_id: str
