"""Resize and crop geometry.

Everything here is a pure function of the source dimensions and the
requested dimensions; nothing touches the image engine.
"""

import math

from .exceptions import InvalidDimensionsError
from .models import CropRegion, ResizePlan


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (``floor(x + 0.5)``)."""
    return int(math.floor(value + 0.5))


def check_dimensions(width: int, height: int) -> None:
    """Reject requests with both dimensions unset or any dimension negative."""
    if width < 0 or height < 0:
        raise InvalidDimensionsError(
            f"width and height of image cannot be negative (got {width}x{height})"
        )
    if width == 0 and height == 0:
        raise InvalidDimensionsError()


def plan_resize(
    source_width: int, source_height: int, width: int, height: int
) -> ResizePlan:
    """
    Compute final dimensions and crop region for a resize.

    A requested dimension of 0 is derived from the other one so the source
    aspect ratio is preserved. When both are set and the source is wider
    than the requested box, an equal strip is cropped from the left and
    right edges before scaling so the result keeps the visual center. A
    source that is as wide or narrower is scaled to the box as is.

    Args:
        source_width: Width of the decoded source image
        source_height: Height of the decoded source image
        width: Requested width, 0 for unset
        height: Requested height, 0 for unset

    Returns:
        The resize plan

    Raises:
        InvalidDimensionsError: If both requested dimensions are unset or
            either is negative
    """
    check_dimensions(width, height)
    if source_width <= 0 or source_height <= 0:
        raise ValueError(
            f"source dimensions must be positive (got {source_width}x{source_height})"
        )

    ow = float(source_width)
    oh = float(source_height)
    fw = float(width)
    fh = float(height)

    if width == 0:
        scaling = fh / oh
        return ResizePlan(
            final_width=max(1, round_half_up(scaling * ow)), final_height=height
        )

    if height == 0:
        scaling = fw / ow
        return ResizePlan(
            final_width=width, final_height=max(1, round_half_up(scaling * oh))
        )

    crop = None
    if ow / oh > fw / fh:
        scaling = fh / oh
        pre_crop_width = max(1, round_half_up(fw / scaling))
        delta = source_width - pre_crop_width
        if delta >= 1:
            crop = CropRegion(
                width=pre_crop_width, height=source_height, x=delta // 2, y=0
            )

    return ResizePlan(final_width=width, final_height=height, crop=crop)
