# rescaler/service/scale_service.py
import logging
from functools import lru_cache
from typing import Optional

from config.settings import Settings, settings
from rescaler.core.errors import RescaleError
from rescaler.core.providers import (
    EnvServiceNameResolver,
    GoogleCredentialProvider,
    MetadataProjectResolver,
)
from rescaler.core.rescaler import Rescaler
from rescaler.dto.scale_dto import ScalingDTO

logger = logging.getLogger(__name__)

class ScaleService:
    def __init__(self, rescaler: Optional[Rescaler] = None, cfg: Settings = settings):
        self.rescaler = rescaler or Rescaler(
            credentials=GoogleCredentialProvider(
                scopes=cfg.auth.scopes,
                timeout=cfg.http.timeout_seconds,
            ),
            projects=MetadataProjectResolver(
                url=cfg.metadata.project_id_url,
                headers=cfg.metadata.headers,
                timeout=cfg.metadata.timeout_seconds,
                project=cfg.run.project,
            ),
            services=EnvServiceNameResolver(cfg.run.service_env_var),
            run_cfg=cfg.run,
        )

    async def rescale(self, min_instances: int, max_instances: int) -> bool:
        try:
            changed = await self.rescaler.rescale(min_instances, max_instances)
        except RescaleError as e:
            logger.error(f"[Scale] rescale to min={min_instances} max={max_instances} failed: {e}")
            raise

        if changed:
            logger.info(f"[Scale] new revision requested with min={min_instances} max={max_instances}")
        return changed

    async def current_scaling(self) -> ScalingDTO:
        try:
            return await self.rescaler.current_scaling()
        except RescaleError as e:
            logger.error(f"[Scale] reading current scaling failed: {e}")
            raise

@lru_cache
def get_scale_service() -> ScaleService:
    return ScaleService()
