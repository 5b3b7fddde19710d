from pydantic import BaseModel, Field
from typing import Optional

class RescaleRequestDTO(BaseModel):
    min_instances: int = Field(ge=0)
    max_instances: int = Field(ge=0)

class RescaleResponseDTO(BaseModel):
    success: bool
    changed: bool  # False when the service already had the requested bounds

class ScalingDTO(BaseModel):
    # Raw annotation values as stored on the revision template
    min_instances: Optional[str] = None
    max_instances: Optional[str] = None
