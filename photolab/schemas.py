from pydantic import BaseModel, Field
from typing import Any, Optional

class UploadResponse(BaseModel):
    message: str
    preview: str
    brightness: float = Field(ge=0.0, le=100.0)
    contrast: float = Field(ge=0.0, le=100.0)
    saturation: float = Field(ge=0.0, le=100.0)
    handle: str

class ProcessRequest(BaseModel):
    handle: str
    # loosely typed on purpose; unusable values fall back to neutral
    brightness: Optional[Any] = None
    contrast: Optional[Any] = None
    saturation: Optional[Any] = None
    rotation: Optional[Any] = None
    format: Optional[Any] = None

class ProcessResponse(BaseModel):
    processedImage: str
    preview: str
    brightness: float
    contrast: float
    saturation: float
    rotation: float
    format: str
    handle: str

class ErrorResponse(BaseModel):
    error: str
    message: str
