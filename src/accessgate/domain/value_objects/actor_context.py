"""Explicit caller identity passed into every mutation."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ActorContext:
    """Who is acting, and in which tenant."""

    subject_id: str
    tenant_id: str
