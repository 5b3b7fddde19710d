from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, Optional

# Only the fields the rescaler touches are modelled; everything else in the
# service document rides along in the extras and is sent back untouched.

class ObjectMetaDTO(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    annotations: Dict[str, str] = Field(default_factory=dict)

    @field_validator("annotations", mode="before")
    @classmethod
    def _null_annotations(cls, v: Any) -> Any:
        return {} if v is None else v

class RevisionTemplateDTO(BaseModel):
    model_config = ConfigDict(extra="allow")

    metadata: ObjectMetaDTO = Field(default_factory=ObjectMetaDTO)

class ServiceSpecDTO(BaseModel):
    model_config = ConfigDict(extra="allow")

    template: RevisionTemplateDTO

class ServiceDescriptionDTO(BaseModel):
    model_config = ConfigDict(extra="allow")

    metadata: ObjectMetaDTO
    spec: ServiceSpecDTO

    def to_payload(self) -> Dict[str, Any]:
        # A cleared template name must be absent, not "", so the API mints a new revision name
        return self.model_dump(mode="json", exclude_none=True)
