from typing import Any, Dict, Optional

from pydantic import Field

from .common import ARMBaseModel


class ServerModel(ARMBaseModel):
    id: Optional[str] = None
    name: str
    location: str
    kind: Optional[str] = None
    tags: Optional[Dict[str, str]] = None
    properties: Dict[str, Any] = Field(default_factory=dict)
