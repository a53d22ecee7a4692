"""Cortana OCR API - Tesseract-backed text and bounding box extraction."""

from cortana_ocr_api.config import Settings, get_settings
from cortana_ocr_api.models import BboxType, BoundingBox

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "get_settings",
    "BboxType",
    "BoundingBox",
]
