"""
Image ingestion and export operations for Open Retouch.

This module turns files or uploaded bytes into SourceImage objects and
encodes finished renders for saving. Inputs that are not images are ignored
rather than reported as errors.

Functions:
    is_image_content_type: Check an upload's MIME type
    load_source_image: Decode an image file into a SourceImage
    load_source_from_bytes: Decode uploaded/pasted bytes into a SourceImage
    export_png_bytes: Encode a render as PNG bytes
    save_export: Write a render to an output directory
"""

import io
import logging
from pathlib import Path
from typing import Any, Optional

from OR_Libs.pillow_compat import Image
from OR_Libs.constants import (
    DEFAULT_EXPORT_FILENAME,
    DEFAULT_OUTPUT_FORMAT,
    IMAGE_CONTENT_TYPE_PREFIX,
    SUPPORTED_STANDARD_IMAGES,
)
from OR_Libs.ImageEditingLib.image_models import SourceImage

logger = logging.getLogger(__name__)


def is_image_content_type(content_type: Optional[str]) -> bool:
    """True for 'image/*' MIME types."""
    return bool(content_type) and content_type.lower().startswith(IMAGE_CONTENT_TYPE_PREFIX)


def load_source_image(image_path: Path) -> Optional[SourceImage]:
    """
    Decode an image file.

    Args:
        image_path: Path to the image file

    Returns:
        A SourceImage, or None if the extension is not a supported image type

    Raises:
        FileNotFoundError: If the file does not exist
        OSError: If Pillow cannot decode the file
    """
    image_path = Path(image_path)
    if image_path.suffix.lower() not in SUPPORTED_STANDARD_IMAGES:
        logger.warning(f"Ignoring non-image file: {image_path.name}")
        return None

    if not image_path.exists():
        raise FileNotFoundError(f"Image file not found: {image_path}")

    with Image.open(image_path) as img:
        img.load()
        source = SourceImage.from_image(img, path=image_path)

    logger.info(f"Loaded {image_path.name} ({source.width}x{source.height})")
    return source


def load_source_from_bytes(data: bytes, content_type: Optional[str]) -> Optional[SourceImage]:
    """
    Decode uploaded, dropped or pasted image bytes.

    Args:
        data: Encoded image bytes
        content_type: MIME type reported by the collaborator

    Returns:
        A SourceImage, or None if content_type is not an image type

    Raises:
        OSError: If Pillow cannot decode the bytes
    """
    if not is_image_content_type(content_type):
        logger.warning(f"Ignoring upload with content type: {content_type}")
        return None

    with Image.open(io.BytesIO(data)) as img:
        img.load()
        source = SourceImage.from_image(img)

    logger.info(f"Loaded {content_type} upload ({source.width}x{source.height})")
    return source


def export_png_bytes(image: Any, save_format: str = DEFAULT_OUTPUT_FORMAT) -> bytes:
    """Encode a render in a lossless format (PNG by default)."""
    if not hasattr(image, "save"):
        raise TypeError(f"Expected PIL Image, got {type(image)}")

    buffer = io.BytesIO()
    image.save(buffer, format=save_format)
    return buffer.getvalue()


def save_export(
    image: Any,
    output_dir: Path,
    filename: str = DEFAULT_EXPORT_FILENAME,
    save_format: str = DEFAULT_OUTPUT_FORMAT,
) -> Path:
    """
    Save an exported render to disk.

    Args:
        image: PIL Image to save
        output_dir: Directory path where the image should be saved
        filename: Output file name
        save_format: Pillow format name

    Returns:
        Path of the written file

    Raises:
        OSError: If directory cannot be accessed or file cannot be written
    """
    if not output_dir.exists():
        raise OSError(f"Output directory does not exist: {output_dir}")

    if not output_dir.is_dir():
        raise OSError(f"Output path is not a directory: {output_dir}")

    save_path = output_dir / filename
    image.save(save_path, format=save_format)
    logger.info(f"Exported {image.width}x{image.height} image to {save_path}")
    return save_path
