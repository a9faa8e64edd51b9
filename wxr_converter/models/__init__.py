"""Pydantic models for the configuration and structured postmeta values."""

from .attachment import AttachmentMetadata, ImageSize
from .config import ConverterConfig, UrlPolicy

__all__ = ["AttachmentMetadata", "ConverterConfig", "ImageSize", "UrlPolicy"]
