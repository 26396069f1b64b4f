"""Core utilities and shared components for the thumbnailer."""

from .geometry import check_dimensions, plan_resize, round_half_up
from .logging_config import get_logger, set_debug, setup_logger
from .exceptions import (
    ThumbnailerError,
    ValidationError,
    ConfigurationError,
    FetchError,
    ResizeError,
    ResizeFailure,
    InvalidDimensionsError,
    PublishError,
    PublishFailure,
    with_error_handling,
)
from .models import (
    CropRegion,
    ResizePlan,
    ResizeRequest,
    ServiceConfig,
    UploadResult,
)

__all__ = [
    "CropRegion",
    "ResizePlan",
    "ResizeRequest",
    "ServiceConfig",
    "UploadResult",
    "check_dimensions",
    "plan_resize",
    "round_half_up",
    "setup_logger",
    "get_logger",
    "set_debug",
    "ThumbnailerError",
    "ValidationError",
    "ConfigurationError",
    "FetchError",
    "ResizeError",
    "ResizeFailure",
    "InvalidDimensionsError",
    "PublishError",
    "PublishFailure",
    "with_error_handling",
]
