import asyncio
import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from config.settings import RunCfg
from rescaler.core.errors import DecodeError, TransportError, UpdateRejectedError
from rescaler.core.providers import CredentialProvider, ProjectResolver, ServiceNameResolver
from rescaler.dto.scale_dto import ScalingDTO
from rescaler.dto.service_dto import ServiceDescriptionDTO

logger = logging.getLogger(__name__)


class Rescaler:
    """
    Changes the min/max instances of a Cloud Run service on the fly via the
    Knative serving admin API. Every effective change creates a new revision.

    Meant to run on a cron-like schedule to get ahead of traffic shifts that
    Cloud Run's own autoscaling can't absorb gracefully, e.g.:
    - scale up before a large data push from a partner that lands on a fixed schedule
    - keep more idle instances during the day and scale back down at night
    """

    def __init__(
        self,
        credentials: CredentialProvider,
        projects: ProjectResolver,
        services: ServiceNameResolver,
        run_cfg: RunCfg,
    ):
        self.credentials = credentials
        self.projects = projects
        self.services = services
        self.cfg = run_cfg

    async def rescale(
        self,
        min_instances: int,
        max_instances: int,
        timeout: Optional[float] = None,
    ) -> bool:
        """
        Returns True if an update was sent, False if the service already had
        these bounds. Raises a RescaleError subclass on any failure.
        """
        try:
            return await asyncio.wait_for(self._rescale(min_instances, max_instances), timeout)
        except asyncio.TimeoutError as e:
            raise TransportError(f"rescale timed out after {timeout}s") from e

    async def current_scaling(self, timeout: Optional[float] = None) -> ScalingDTO:
        try:
            return await asyncio.wait_for(self._current_scaling(), timeout)
        except asyncio.TimeoutError as e:
            raise TransportError(f"reading scaling timed out after {timeout}s") from e

    async def _rescale(self, min_instances: int, max_instances: int) -> bool:
        client = await self.credentials.acquire_client()
        async with client:
            url = await self._service_url()
            svc = await self._fetch(client, url)

            # string compare: annotations are strings on the wire
            new_min = str(min_instances)
            new_max = str(max_instances)
            annotations = svc.spec.template.metadata.annotations
            if (annotations.get(self.cfg.min_scale_annotation) == new_min
                    and annotations.get(self.cfg.max_scale_annotation) == new_max):
                logger.info(f"[Run] {url} already at min={new_min} max={new_max}, nothing to do")
                return False

            self._apply_bounds(svc, new_min, new_max)
            logger.info(f"[Run] updating {url}: min={new_min} max={new_max}")
            await self._update(client, url, svc)
            return True

    async def _current_scaling(self) -> ScalingDTO:
        client = await self.credentials.acquire_client()
        async with client:
            url = await self._service_url()
            svc = await self._fetch(client, url)

        annotations = svc.spec.template.metadata.annotations
        return ScalingDTO(
            min_instances=annotations.get(self.cfg.min_scale_annotation),
            max_instances=annotations.get(self.cfg.max_scale_annotation),
        )

    async def _service_url(self) -> str:
        project = await self.projects.resolve_project_id()
        service = self.services.resolve_service_name()
        return self.cfg.service_url(project, service)

    def _apply_bounds(self, svc: ServiceDescriptionDTO, new_min: str, new_max: str):
        # the minScale setting is only accepted with the BETA launch stage on top-level metadata
        svc.metadata.annotations[self.cfg.launch_stage_annotation] = self.cfg.launch_stage
        # the API rejects a template that reuses the current revision name
        svc.spec.template.metadata.name = None
        svc.spec.template.metadata.annotations[self.cfg.min_scale_annotation] = new_min
        svc.spec.template.metadata.annotations[self.cfg.max_scale_annotation] = new_max

    async def _fetch(self, client: httpx.AsyncClient, url: str) -> ServiceDescriptionDTO:
        try:
            async with client.stream("GET", url) as response:
                body = await response.aread()
        except httpx.HTTPError as e:
            raise TransportError(f"GET {url} failed: {e}") from e

        if not response.is_success:
            raise TransportError(
                f"GET {url} answered {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return ServiceDescriptionDTO.model_validate_json(body)
        except ValidationError as e:
            raise DecodeError(f"Unexpected service description from {url}: {e}") from e

    async def _update(self, client: httpx.AsyncClient, url: str, svc: ServiceDescriptionDTO):
        payload = svc.to_payload()
        logger.debug(f"[Run] PUT {url} payload={payload}")

        try:
            async with client.stream("PUT", url, json=payload) as response:
                body = await response.aread()
        except httpx.HTTPError as e:
            raise TransportError(f"PUT {url} failed: {e}") from e

        if response.status_code != httpx.codes.OK:
            logger.debug(f"[Run] update rejected: {body[:500]!r}")
            raise UpdateRejectedError(response.status_code)
