"""JSON shapes for API responses."""

from accessgate.domain.entities import Grant, Permission, Resource


def _iso(value) -> str | None:
    return value.isoformat() if value else None


def resource_to_dict(r: Resource, include_link: bool = False) -> dict:
    data = {
        "id": r.id,
        "name": r.name,
        "resource_type": r.resource_type,
        "owner_id": r.owner_id,
        "tenant_id": r.tenant_id,
        "description": r.description,
        "external_id": r.external_id,
        "organization_id": r.organization_id,
        "parent_resource_id": r.parent_resource_id,
        "is_public": r.is_public,
        "public_permissions": sorted(r.public_permissions),
        "is_active": r.is_active,
        "created_at": _iso(r.created_at),
        "updated_at": _iso(r.updated_at),
    }
    if include_link:
        data["public_link_token"] = r.public_link_token
        data["public_link_expires_at"] = _iso(r.public_link_expires_at)
    return data


def grant_to_dict(g: Grant) -> dict:
    return {
        "id": str(g.id),
        "resource_id": g.resource_id,
        "permission_id": str(g.permission_id),
        "user_id": g.user_id,
        "role_id": str(g.role_id) if g.role_id else None,
        "grant_type": g.grant_type.value,
        "granted_by": g.granted_by,
        "expires_at": _iso(g.expires_at),
        "created_at": _iso(g.created_at),
    }


def permission_to_dict(p: Permission) -> dict:
    return {
        "id": str(p.id),
        "name": p.name,
        "resource_type": p.resource_type,
        "description": p.description,
        "is_system": p.is_system,
    }
