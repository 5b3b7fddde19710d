from typing import Any, Awaitable, Callable, Optional

from rescaler.service.scale_service import ScaleService, get_scale_service


def new_endpoint(
    min_instances: int,
    max_instances: int,
    service: Optional[ScaleService] = None,
) -> Callable[[Any], Awaitable[None]]:
    """
    Generic async endpoint for message-style frameworks: the payload is
    ignored, the result is always None and any RescaleError propagates as is.
    """
    async def endpoint(_request: Any) -> None:
        scale_service = service or get_scale_service()
        await scale_service.rescale(min_instances, max_instances)

    return endpoint
