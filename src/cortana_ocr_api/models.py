"""Pydantic models for OCR requests and responses."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class BboxType(str, Enum):
    """Granularity label accepted by the bounding box endpoint.

    The value is echoed back in the response; rows are not filtered by it.
    """

    WORD = "word"
    LINE = "line"
    PARAGRAPH = "paragraph"
    BLOCK = "block"
    PAGE = "page"


class GetTextRequest(BaseModel):
    """Body of POST /api/get-text."""

    base64_image: Optional[str] = Field(None, description="Base64-encoded JPEG, PNG or GIF")


class GetBboxesRequest(BaseModel):
    """Body of POST /api/get-bboxes."""

    base64_image: Optional[str] = Field(None, description="Base64-encoded JPEG, PNG or GIF")
    bbox_type: Optional[str] = Field(None, description="One of word, line, paragraph, block, page")


class BoundingBox(BaseModel):
    """One row of tesseract TSV output."""

    text: str
    confidence: Optional[float] = None
    x_min: Optional[int] = None
    y_min: Optional[int] = None
    x_max: Optional[int] = None
    y_max: Optional[int] = None


class TextResult(BaseModel):
    text: str


class BboxResult(BaseModel):
    bboxes: list[BoundingBox]
    bbox_type: BboxType


class GetTextResponse(BaseModel):
    success: bool = True
    result: TextResult


class GetBboxesResponse(BaseModel):
    success: bool = True
    result: BboxResult


class ErrorDetail(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Error body shared by every endpoint."""

    success: bool = False
    error: ErrorDetail
