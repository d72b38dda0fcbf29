from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional


class ComputeResources(BaseModel):
    """Resource requests of one container, as quantity strings ("500m", "256Mi")."""
    model_config = ConfigDict(frozen=True)

    requested_cpu: str
    requested_memory: str


class Container(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    image: Optional[str] = None
    compute_resources: ComputeResources


class Metadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    labels: Dict[str, str] = Field(default_factory=dict)


class PodComputeInfo(BaseModel):
    """Normalized compute inventory record of one running pod"""
    model_config = ConfigDict(frozen=True)

    name: str
    namespace: str
    node_name: str = ""
    maintainer: str = ""
    containers: List[Container] = Field(default_factory=list)
    metadata: Optional[Metadata] = None


class PodComputeInfoRequest(BaseModel):
    namespaces: List[str]
    # Accepted for compatibility with existing callers, not applied.
    maintainers: Optional[List[str]] = None
