"""Firmware image discovery.

Compiled images are written by the toolchain to
``<devices_path>/<device_id>/``. This module finds them and classifies
them by file type.
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path

from tyr.types import ImageInfo

logger = logging.getLogger(__name__)

IMAGE_KINDS = {
    ".hex": "hex",
    ".bin": "bin",
    ".uf2": "uf2",
    ".elf": "elf",
}

# Default chunk size for hashing
HASH_CHUNK_SIZE = 64 * 1024  # 64KB


def classify_image(filename: str) -> str:
    """Classify an image by its file suffix.

    Returns:
        Image kind (hex, bin, uf2, elf, other).
    """
    return IMAGE_KINDS.get(Path(filename).suffix.lower(), "other")


def compute_file_hash(file_path: Path, chunk_size: int = HASH_CHUNK_SIZE) -> str:
    """Compute SHA-256 hash of a file."""
    sha256 = hashlib.sha256()
    with file_path.open("rb") as f:
        while chunk := f.read(chunk_size):
            sha256.update(chunk)
    return sha256.hexdigest()


def discover_images(devices_path: Path | str) -> list[ImageInfo]:
    """Discover firmware images in every device directory.

    Args:
        devices_path: Root directory holding one directory per device.

    Returns:
        ImageInfo list ordered by device id then filename.
    """
    root = Path(devices_path)
    if not devices_path or not root.is_dir():
        logger.warning("Devices path does not exist: %s", root)
        return []

    images: list[ImageInfo] = []
    for device_dir in sorted(p for p in root.iterdir() if p.is_dir()):
        for path in sorted(device_dir.iterdir()):
            if not path.is_file():
                continue
            kind = classify_image(path.name)
            if kind == "other":
                continue

            image = ImageInfo(
                device_id=device_dir.name,
                filename=path.name,
                path=str(path),
                size_bytes=path.stat().st_size,
                sha256=compute_file_hash(path),
                kind=kind,
            )
            # Bootloader-combined builds are the ones to flash on blank boards
            if "with_bootloader" in path.name:
                image.labels.append("with_bootloader")
            images.append(image)
            logger.debug("Discovered image: %s (kind=%s)", path, kind)

    logger.info("Discovered %d images in %s", len(images), root)
    return images


__all__ = ["classify_image", "compute_file_hash", "discover_images"]
