from typing import List, Optional

from pydantic import BaseModel, Field

from brickmap.constants import OWNER_ID, OWNER_NAME


class ConvertRequest(BaseModel):
    heightmaps: List[str] = Field(..., min_length=1)
    colormap: Optional[str] = None
    output_name: Optional[str] = None
    preview: bool = False          # also write a GLB preview mesh
    size: int = Field(1, ge=1)     # brick stud size
    vertical: int = Field(1, ge=0)
    cull: bool = False
    tile: bool = False
    micro: bool = False
    stud: bool = False
    snap: bool = False
    lrgb: bool = False
    img: bool = False
    glow: bool = False
    hdmap: bool = False
    nocollide: bool = False
    quadtree: bool = True
    layers: int = Field(0, ge=0)
    owner_id: str = OWNER_ID
    owner: str = OWNER_NAME


class JobResponse(BaseModel):
    job_id: str
    status: str
    progress: float
    message: str
    result: Optional[dict] = None


class SaveInfo(BaseModel):
    name: str
    filename: str
    size_bytes: int
