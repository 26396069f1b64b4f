"""Thumbnail generation on top of Pillow.

Pillow is driven through one process-wide gate: only a single resize runs
its decode, crop, scale and encode steps at any time.
"""

import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from PIL import Image

from .exceptions import ResizeError, ResizeFailure
from .geometry import check_dimensions, plan_resize
from .logging_config import get_logger
from .models import ResizePlan
from .protocols import Resizer
from .scratch import scratch_file

_ENGINE_LOCK = threading.Lock()

# Modes each encoder stores as-is. Other modes are converted to RGB, or to
# RGBA when the source has alpha and the format can keep it.
_WRITABLE_MODES = {
    "JPEG": ("1", "L", "RGB", "CMYK"),
    "PNG": ("1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA"),
    "GIF": ("1", "L", "P", "RGB", "RGBA"),
    "WEBP": ("RGB", "RGBA"),
    "BMP": ("1", "L", "P", "RGB", "RGBA"),
}


@contextmanager
def engine_session() -> Iterator[None]:
    """Hold the engine gate and make sure Pillow's plugins are loaded."""
    with _ENGINE_LOCK:
        Image.init()
        yield


def _has_alpha(image: Image.Image) -> bool:
    return "A" in image.getbands() or "transparency" in image.info


def resolve_format(output_format: str) -> str:
    """
    Map a requested format ("jpg", "png", ...) to Pillow's format name.

    Raises:
        ResizeError: If Pillow cannot write the format
    """
    name = output_format.strip().lower().lstrip(".")
    Image.init()
    pillow_format = Image.registered_extensions().get(f".{name}")
    if pillow_format is None and name.upper() in Image.SAVE:
        pillow_format = name.upper()
    if pillow_format is None or pillow_format not in Image.SAVE:
        raise ResizeError(
            f"unsupported output format '{output_format}'", kind=ResizeFailure.FORMAT
        )
    return pillow_format


def encoder_options(pillow_format: str, compression: int) -> Dict[str, Any]:
    """
    Build the save() keyword arguments for a compression quality.

    Raises:
        ResizeError: If the quality is not an integer between 0 and 100
    """
    if isinstance(compression, bool) or not isinstance(compression, int):
        raise ResizeError(
            f"invalid compression quality {compression!r}", kind=ResizeFailure.QUALITY
        )
    if not 0 <= compression <= 100:
        raise ResizeError(
            f"compression quality must be between 0 and 100 (got {compression})",
            kind=ResizeFailure.QUALITY,
        )
    if pillow_format == "PNG":
        return {"compress_level": min(compression // 10, 9)}
    return {"quality": compression}


class ImageResizer(Resizer):
    """Crops, scales, reformats and compresses images with Pillow."""

    def __init__(self, scratch_dir: Optional[str] = None):
        self._scratch_dir = scratch_dir

    def resize(
        self,
        source_path: str,
        output_format: str,
        width: int,
        height: int,
        compression: int,
    ) -> str:
        """
        Produce a thumbnail of ``source_path`` in a new scratch file.

        A dimension of 0 is derived from the source aspect ratio. See
        ``geometry.plan_resize`` for the crop rules.

        Returns:
            Path of the thumbnail scratch file

        Raises:
            InvalidDimensionsError: If both dimensions are unset
            ResizeError: If any engine step fails; ``kind`` names the step
        """
        check_dimensions(width, height)

        logger = get_logger("img-thumbnailer.resizer")

        with engine_session():
            try:
                source = Image.open(source_path)
            except (OSError, SyntaxError, Image.DecompressionBombError) as exc:
                raise ResizeError(
                    f"cannot decode source image: {exc}", kind=ResizeFailure.DECODE
                ) from exc

            with source:
                try:
                    source.load()
                except (OSError, SyntaxError, Image.DecompressionBombError) as exc:
                    raise ResizeError(
                        f"cannot decode source image: {exc}", kind=ResizeFailure.DECODE
                    ) from exc

                plan = plan_resize(source.width, source.height, width, height)
                logger.debug(
                    f"Resizing {source.width}x{source.height} -> "
                    f"{plan.final_width}x{plan.final_height} (crop={plan.crop})"
                )
                image = self._crop(source, plan)
                image = self._scale(image, plan)

                pillow_format = resolve_format(output_format)
                image = self._convert_for_format(image, pillow_format)
                options = encoder_options(pillow_format, compression)

                return self._write(image, pillow_format, options, output_format)

    @staticmethod
    def _crop(image: Image.Image, plan: ResizePlan) -> Image.Image:
        crop = plan.crop
        if crop is None:
            return image
        if (
            crop.x + crop.width > image.width
            or crop.y + crop.height > image.height
        ):
            raise ResizeError(
                f"crop region {crop.as_box()} outside image "
                f"{image.width}x{image.height}",
                kind=ResizeFailure.CROP,
            )
        try:
            return image.crop(crop.as_box())
        except (OSError, ValueError) as exc:
            raise ResizeError(f"cannot crop image: {exc}", kind=ResizeFailure.CROP) from exc

    @staticmethod
    def _scale(image: Image.Image, plan: ResizePlan) -> Image.Image:
        try:
            # Pillow scales 1 and P images with NEAREST whatever filter is given.
            if image.mode == "1":
                image = image.convert("L")
            elif image.mode == "P":
                image = image.convert("RGBA" if _has_alpha(image) else "RGB")
            return image.resize(plan.size, Image.Resampling.LANCZOS)
        except (OSError, ValueError) as exc:
            raise ResizeError(f"cannot scale image: {exc}", kind=ResizeFailure.SCALE) from exc

    @staticmethod
    def _convert_for_format(image: Image.Image, pillow_format: str) -> Image.Image:
        writable = _WRITABLE_MODES.get(pillow_format)
        if writable is None or image.mode in writable:
            return image
        target = "RGBA" if "RGBA" in writable and _has_alpha(image) else "RGB"
        try:
            return image.convert(target)
        except (OSError, ValueError) as exc:
            raise ResizeError(
                f"cannot convert {image.mode} image to {pillow_format}: {exc}",
                kind=ResizeFailure.FORMAT,
            ) from exc

    def _write(
        self,
        image: Image.Image,
        pillow_format: str,
        options: Dict[str, Any],
        output_format: str,
    ) -> str:
        suffix = "." + output_format.strip().lower().lstrip(".")
        with scratch_file(suffix=suffix, directory=self._scratch_dir) as path:
            try:
                with open(path, "wb") as fh:
                    image.save(fh, format=pillow_format, **options)
            except (OSError, ValueError, KeyError) as exc:
                raise ResizeError(
                    f"cannot write thumbnail: {exc}", kind=ResizeFailure.WRITE
                ) from exc
        return path
