import logging

from fastapi import APIRouter, Depends

from cortana_ocr_api.config import Settings, get_settings
from cortana_ocr_api.errors import InvalidInputError
from cortana_ocr_api.models import (
    BboxResult,
    BboxType,
    ErrorResponse,
    GetBboxesRequest,
    GetBboxesResponse,
    GetTextRequest,
    GetTextResponse,
    TextResult,
)
from cortana_ocr_api.utils.images import decode_base64_image
from cortana_ocr_api.utils.staging import cleanup_staged_files, stage_image
from cortana_ocr_api.utils.tesseract import read_text_result, read_tsv_result, recognize

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["ocr"],
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)

VALID_BBOX_TYPES = {bbox_type.value for bbox_type in BboxType}


def _parse_bbox_type(value: str | None) -> BboxType:
    if not value or value not in VALID_BBOX_TYPES:
        raise InvalidInputError("Invalid bbox_type.")
    return BboxType(value)


# ---------- Plain text ----------
@router.post("/get-text", response_model=GetTextResponse)
async def get_text(payload: GetTextRequest, settings: Settings = Depends(get_settings)):
    """Run OCR on the image and return its text."""
    image = decode_base64_image(payload.base64_image)

    staged = await stage_image(image, settings)
    try:
        await recognize(staged, settings)
        text = await read_text_result(staged)
    finally:
        cleanup_staged_files(staged)

    logger.info(f"get-text: {len(text)} chars recognized")
    return GetTextResponse(result=TextResult(text=text))


# ---------- Bounding boxes ----------
@router.post("/get-bboxes", response_model=GetBboxesResponse)
async def get_bboxes(payload: GetBboxesRequest, settings: Settings = Depends(get_settings)):
    """Run OCR in TSV mode and return every row as a bounding box.

    bbox_type is validated and echoed back; rows of all levels are returned.
    """
    image = decode_base64_image(payload.base64_image)
    bbox_type = _parse_bbox_type(payload.bbox_type)

    staged = await stage_image(image, settings)
    try:
        await recognize(staged, settings, tabular=True)
        bboxes = await read_tsv_result(staged)
    finally:
        cleanup_staged_files(staged)

    logger.info(f"get-bboxes: {len(bboxes)} rows ({bbox_type.value})")
    return GetBboxesResponse(result=BboxResult(bboxes=bboxes, bbox_type=bbox_type))
