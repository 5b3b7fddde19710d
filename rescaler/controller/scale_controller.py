import logging
from typing import Callable, Dict

from fastapi import APIRouter, Depends, HTTPException, Response, status

from rescaler.core.errors import RescaleError, TransportError, UpdateRejectedError
from rescaler.dto.scale_dto import RescaleRequestDTO, RescaleResponseDTO, ScalingDTO
from rescaler.service.scale_service import ScaleService, get_scale_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix='/api')


def new_handler(min_instances: int, max_instances: int) -> Callable:
    """
    Bare handler for schedulers: 200 on success, 500 with no body on any error.
    The request itself is ignored, e.g.

        router.add_api_route("/scale/up", new_handler(100, 1000), methods=["POST"])
    """
    async def handler(service: ScaleService = Depends(get_scale_service)) -> Response:
        try:
            await service.rescale(min_instances, max_instances)
        except RescaleError:
            return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
        except Exception:
            logger.exception("[Scale] unexpected failure in scale handler")
            return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(status_code=status.HTTP_200_OK)

    return handler


def build_preset_router(presets: Dict[str, Dict[str, int]]) -> APIRouter:
    preset_router = APIRouter(prefix='/scale')
    for name, bounds in presets.items():
        preset_router.add_api_route(
            f"/{name}",
            new_handler(bounds["min"], bounds["max"]),
            methods=["GET", "POST"],
            name=f"scale_{name}",
        )
    return preset_router


@router.post("/rescale", response_model=RescaleResponseDTO)
async def rescale(
    request: RescaleRequestDTO,
    service: ScaleService = Depends(get_scale_service),
):
    """Set arbitrary min/max instances on the current service"""
    try:
        changed = await service.rescale(request.min_instances, request.max_instances)
        return RescaleResponseDTO(success=True, changed=changed)
    except (UpdateRejectedError, TransportError) as e:
        raise HTTPException(status_code=502, detail=f"Rescale failed: {str(e)}")
    except RescaleError as e:
        raise HTTPException(status_code=500, detail=f"Rescale failed: {str(e)}")


@router.get("/scaling", response_model=ScalingDTO)
async def get_current_scaling(service: ScaleService = Depends(get_scale_service)):
    """Current min/max annotations (for debugging)"""
    try:
        return await service.current_scaling()
    except (UpdateRejectedError, TransportError) as e:
        raise HTTPException(status_code=502, detail=f"Reading scaling failed: {str(e)}")
    except RescaleError as e:
        raise HTTPException(status_code=500, detail=f"Reading scaling failed: {str(e)}")
