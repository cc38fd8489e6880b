"""Permission checker implementation - the allow/deny resolver."""

import asyncio
import logging
from dataclasses import dataclass

from accessgate.application.audit import audit_event, emit_audit
from accessgate.application.ports import AuditSink, Clock, UnitOfWork
from accessgate.application.services import PermissionCatalog, RoleAggregator
from accessgate.domain.entities import Permission, Resource
from accessgate.domain.exceptions import CycleDetected
from accessgate.domain.value_objects import AuditAction, SubjectRef

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 5.0


@dataclass(frozen=True)
class Decision:
    """Outcome of one evaluation. ``rule`` names the step that allowed it."""

    allowed: bool
    rule: str | None = None
    reason: str | None = None
    depth: int = 0
    resource: Resource | None = None


_DENIED = Decision(False, reason="Permission denied")


class AccessGatePermissionChecker:
    """Combines ownership, grants, roles, inheritance and public access.

    Precedence for an authenticated subject, first match wins:

    1. tenant guard - resource in another tenant denies unconditionally
    2. ownership
    3. valid direct grant to the subject
    4. a role the subject holds in the tenant that contains the permission,
       or a valid grant addressed to such a role
    5. the same evaluation against the parent resource

    Every path fails closed: missing records, store errors, timeouts and
    hierarchy cycles all produce ``False``. Each call emits one audit event.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        audit_sink: AuditSink,
        clock: Clock,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._audit_sink = audit_sink
        self._clock = clock
        self._timeout = timeout_seconds

    async def check(
        self, subject_id: str | None, resource_id: str, permission_name: str, tenant_id: str
    ) -> bool:
        """Check if subject has permission on resource within tenant."""
        decision = await self._guarded(
            self._decide(subject_id, resource_id, permission_name, tenant_id),
            what="permission check",
        )
        logger.debug(
            "check subject=%s resource=%s permission=%s tenant=%s allowed=%s rule=%s reason=%s",
            subject_id,
            resource_id,
            permission_name,
            tenant_id,
            decision.allowed,
            decision.rule,
            decision.reason,
        )
        await emit_audit(
            self._audit_sink,
            audit_event(
                AuditAction.ACCESS_ATTEMPT,
                tenant_id,
                self._clock.now(),
                success=decision.allowed,
                actor_id=subject_id,
                resource_id=resource_id,
                permission=permission_name,
                reason=decision.reason,
                rule=decision.rule,
                depth=decision.depth,
            ),
        )
        return decision.allowed

    async def check_anonymous(
        self, resource_id: str, permission_name: str, tenant_id: str
    ) -> bool:
        """Anonymous access: only the resource's explicit public allow-list counts."""
        decision = await self._guarded(
            self._decide_anonymous(resource_id, permission_name, tenant_id),
            what="anonymous check",
        )
        await emit_audit(
            self._audit_sink,
            audit_event(
                AuditAction.ANONYMOUS_ACCESS,
                tenant_id,
                self._clock.now(),
                success=decision.allowed,
                resource_id=resource_id,
                permission=permission_name,
                reason=decision.reason,
            ),
        )
        return decision.allowed

    async def validate_public_link(self, token: str, permission_name: str) -> bool:
        """Resolve resource by link token; token must be unexpired, then anonymous rules."""
        decision = await self._guarded(
            self._decide_public_link(token, permission_name),
            what="public link validation",
        )
        resource = decision.resource
        await emit_audit(
            self._audit_sink,
            audit_event(
                AuditAction.PUBLIC_LINK_ACCESS,
                resource.tenant_id if resource else None,
                self._clock.now(),
                success=decision.allowed,
                resource_id=resource.id if resource else None,
                permission=permission_name,
                reason=decision.reason,
            ),
        )
        return decision.allowed

    async def _guarded(self, evaluation, what: str) -> Decision:
        """Run an evaluation under the store timeout, converting any fault to deny."""
        try:
            return await asyncio.wait_for(evaluation, self._timeout)
        except TimeoutError:
            logger.warning("%s timed out after %.1fs; denying", what, self._timeout)
            return Decision(False, reason="Store timeout")
        except CycleDetected as e:
            logger.warning("%s hit a hierarchy cycle; denying: %s", what, e)
            return Decision(False, reason=f"CycleDetected: {e.resource_id}")
        except Exception as e:
            logger.warning("%s failed; denying", what, exc_info=True)
            return Decision(False, reason=f"{type(e).__name__}: {e}")

    async def _decide(
        self, subject_id: str | None, resource_id: str, permission_name: str, tenant_id: str
    ) -> Decision:
        if not subject_id:
            return Decision(False, reason="Subject missing")
        async with self._uow_factory() as uow:
            permission = await PermissionCatalog(uow).resolve(permission_name)
            if permission is None:
                return Decision(False, reason="Permission not found")
            resource = await uow.resources.get_by_id(resource_id)
            if resource is None:
                return Decision(False, reason="Resource not found")
            return await self._evaluate(uow, subject_id, resource, permission, tenant_id)

    async def _evaluate(
        self,
        uow: UnitOfWork,
        subject_id: str,
        resource: Resource,
        permission: Permission,
        tenant_id: str,
    ) -> Decision:
        """Evaluate steps 1-4 on resource, then on each ancestor in turn."""
        now = self._clock.now()
        aggregator = RoleAggregator(uow)
        tenant_roles = None
        org_roles = None
        visited: set[str] = set()
        current: Resource | None = resource
        depth = 0

        while current is not None:
            if current.id in visited:
                raise CycleDetected(current.id)
            visited.add(current.id)

            if current.tenant_id != tenant_id:
                return Decision(False, reason="Tenant mismatch", depth=depth)
            if not current.is_active:
                return Decision(False, reason="Resource inactive", depth=depth)

            if current.owner_id == subject_id:
                return Decision(True, rule="ownership", depth=depth)

            grants = await uow.grants.list_for_subject(SubjectRef.user(subject_id), current.id)
            if any(g.permission_id == permission.id and g.is_valid(now) for g in grants):
                return Decision(True, rule="direct_grant", depth=depth)

            if tenant_roles is None:
                tenant_roles = await aggregator.tenant_roles(subject_id, tenant_id)
            roles = list(tenant_roles)
            if current.organization_id is not None:
                if org_roles is None:
                    org_roles = await aggregator.organization_roles(subject_id, tenant_id, now)
                seen = {r.id for r in roles}
                roles += [
                    r for r in org_roles.get(current.organization_id, []) if r.id not in seen
                ]
            if RoleAggregator.any_allows(roles, permission.name):
                return Decision(True, rule="role", depth=depth)
            if roles:
                role_grants = await uow.grants.list_for_roles([r.id for r in roles], current.id)
                if any(g.permission_id == permission.id and g.is_valid(now) for g in role_grants):
                    return Decision(True, rule="role_grant", depth=depth)

            if current.parent_resource_id is None:
                break
            current = await uow.resources.get_by_id(current.parent_resource_id)
            depth += 1

        return _DENIED

    async def _decide_anonymous(
        self, resource_id: str, permission_name: str, tenant_id: str
    ) -> Decision:
        async with self._uow_factory() as uow:
            permission = await PermissionCatalog(uow).resolve(permission_name)
            if permission is None:
                return Decision(False, reason="Permission not found")
            resource = await uow.resources.get_by_id(resource_id)
            if resource is None:
                return Decision(False, reason="Resource not found")
        return self._anonymous_rule(resource, permission, tenant_id)

    async def _decide_public_link(self, token: str, permission_name: str) -> Decision:
        if not token:
            return Decision(False, reason="Token missing")
        async with self._uow_factory() as uow:
            resource = await uow.resources.get_by_public_token(token)
            if resource is None:
                return Decision(False, reason="Unknown public link")
            if not resource.is_public_link_valid(self._clock.now()):
                return Decision(False, reason="Public link expired", resource=resource)
            permission = await PermissionCatalog(uow).resolve(permission_name)
            if permission is None:
                return Decision(False, reason="Permission not found", resource=resource)
        return self._anonymous_rule(resource, permission, resource.tenant_id)

    @staticmethod
    def _anonymous_rule(resource: Resource, permission: Permission, tenant_id: str) -> Decision:
        if resource.tenant_id != tenant_id:
            return Decision(False, reason="Tenant mismatch", resource=resource)
        if not resource.is_active:
            return Decision(False, reason="Resource inactive", resource=resource)
        if not resource.allows_anonymous(permission.name):
            return Decision(False, reason="Anonymous access denied", resource=resource)
        return Decision(True, rule="public", resource=resource)
