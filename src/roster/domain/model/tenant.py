"""Tenants partition every other table and every lock."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(eq=False, kw_only=True)
class Tenant:
    id: str
    name: str
    subdomain: str | None = field(default=None)

    @property
    def display_name(self) -> str:
        if self.subdomain:
            return f"{self.name} ({self.subdomain})"
        return self.name
