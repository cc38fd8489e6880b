"""Get public resource use case."""

from accessgate.application.ports import Clock
from accessgate.domain.entities import Resource


class GetPublicResourceUseCase:
    """Resolve the resource behind a public link."""

    def __init__(self, unit_of_work_factory: type, clock: Clock) -> None:
        self._uow_factory = unit_of_work_factory
        self._clock = clock

    async def execute(self, token: str) -> Resource | None:
        """Return the resource if the link is valid and the resource is public, else None."""
        if not token:
            return None
        async with self._uow_factory() as uow:
            resource = await uow.resources.get_by_public_token(token)
        if resource is None or not resource.is_active or not resource.is_public:
            return None
        if not resource.is_public_link_valid(self._clock.now()):
            return None
        return resource
