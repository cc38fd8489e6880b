"""Falcon ASGI application."""

import falcon.asgi
from falcon.asgi import App

from accessgate.application.ports import AuditSink, Clock, PermissionChecker
from accessgate.application.use_cases.grant.delegate_role import DelegateRoleUseCase
from accessgate.application.use_cases.grant.grant_permission import GrantPermissionUseCase
from accessgate.application.use_cases.grant.revoke_permission import RevokePermissionUseCase
from accessgate.application.use_cases.hierarchy.get_children import GetChildrenUseCase
from accessgate.application.use_cases.hierarchy.set_parent import SetParentUseCase
from accessgate.application.use_cases.publication.get_public_resource import (
    GetPublicResourceUseCase,
)
from accessgate.application.use_cases.publication.publish_resource import PublishResourceUseCase
from accessgate.application.use_cases.publication.unpublish_resource import (
    UnpublishResourceUseCase,
)
from accessgate.application.use_cases.resource.deactivate_resource import (
    DeactivateResourceUseCase,
)
from accessgate.application.use_cases.resource.get_accessible_resources import (
    GetAccessibleResourcesUseCase,
)
from accessgate.application.use_cases.resource.register_resource import RegisterResourceUseCase
from accessgate.application.use_cases.resource.transfer_ownership import (
    TransferOwnershipUseCase,
)
from accessgate.domain.exceptions import AccessGateError
from accessgate.interfaces.api.errors import handle_domain_error, handle_unexpected_error
from accessgate.interfaces.api.resources.catalog import PermissionsResource
from accessgate.interfaces.api.resources.decisions import (
    CheckAnonymousPermissionResource,
    CheckPermissionResource,
    ValidatePublicLinkResource,
)
from accessgate.interfaces.api.resources.grants import GrantResource, RevokeResource, ShareResource
from accessgate.interfaces.api.resources.health import HealthResource
from accessgate.interfaces.api.resources.publication import (
    PublicResourceResource,
    PublicResourcesResource,
    PublishResource,
    UnpublishResource,
)
from accessgate.interfaces.api.resources.registry import (
    AccessibleResourcesResource,
    ResourceChildrenResource,
    ResourceOwnerResource,
    ResourceParentResource,
    ResourceResource,
    ResourcesResource,
)


def create_app(
    unit_of_work_factory: type,
    permission_checker: PermissionChecker,
    audit_sink: AuditSink,
    clock: Clock,
    middleware: list | None = None,
    pool=None,
) -> App:
    """Create Falcon ASGI app: use cases, resources and routes."""
    deps = dict(
        unit_of_work_factory=unit_of_work_factory,
        permission_checker=permission_checker,
        audit_sink=audit_sink,
        clock=clock,
    )
    owner_only = dict(unit_of_work_factory=unit_of_work_factory, audit_sink=audit_sink, clock=clock)

    app = falcon.asgi.App(middleware=middleware or [])
    app.add_error_handler(Exception, handle_unexpected_error)
    app.add_error_handler(AccessGateError, handle_domain_error)

    health = HealthResource(pool)
    app.add_route("/v1/health", health)
    app.add_route("/v1/health/ready", health, suffix="ready")

    app.add_route("/v1/acl/check-permission", CheckPermissionResource(permission_checker))
    app.add_route(
        "/v1/acl/check-anonymous-permission",
        CheckAnonymousPermissionResource(permission_checker),
    )
    app.add_route(
        "/v1/acl/validate-public-link/{token}", ValidatePublicLinkResource(permission_checker)
    )

    app.add_route("/v1/acl/grant", GrantResource(GrantPermissionUseCase(**deps)))
    app.add_route("/v1/acl/revoke", RevokeResource(RevokePermissionUseCase(**deps)))
    app.add_route("/v1/acl/share-resource", ShareResource(DelegateRoleUseCase(**deps)))

    app.add_route("/v1/acl/publish-resource", PublishResource(PublishResourceUseCase(**deps)))
    app.add_route(
        "/v1/acl/unpublish-resource", UnpublishResource(UnpublishResourceUseCase(**deps))
    )
    app.add_route(
        "/v1/acl/public-resource/{token}",
        PublicResourceResource(GetPublicResourceUseCase(unit_of_work_factory, clock)),
    )
    app.add_route("/v1/acl/public-resources", PublicResourcesResource(unit_of_work_factory))

    app.add_route("/v1/acl/resources", ResourcesResource(RegisterResourceUseCase(**deps)))
    app.add_route(
        "/v1/acl/resources/{resource_id}",
        ResourceResource(DeactivateResourceUseCase(**owner_only)),
    )
    app.add_route(
        "/v1/acl/resources/{resource_id}/owner",
        ResourceOwnerResource(TransferOwnershipUseCase(**owner_only)),
    )
    app.add_route(
        "/v1/acl/resources/{resource_id}/parent",
        ResourceParentResource(SetParentUseCase(**deps)),
    )
    app.add_route(
        "/v1/acl/resources/{resource_id}/children",
        ResourceChildrenResource(GetChildrenUseCase(unit_of_work_factory, permission_checker)),
    )
    app.add_route(
        "/v1/acl/accessible-resources",
        AccessibleResourcesResource(GetAccessibleResourcesUseCase(unit_of_work_factory, clock)),
    )
    app.add_route("/v1/acl/permissions", PermissionsResource(unit_of_work_factory))
    return app
