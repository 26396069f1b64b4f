"""Shared data models for the thumbnailer."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

DEFAULT_CONFIG_PATH = "./etc/img-thumbnailer/server.conf"
DEFAULT_CREDENTIALS_PROFILE = "thumbnailer"


class ResizeRequest(BaseModel):
    """Body of an inbound resize request.

    A dimension of 0 means "unset": it is derived from the source aspect
    ratio. At least one of ``width``/``height`` must be set.
    """

    url: str
    format: str = Field(min_length=1)
    compression: int = Field(ge=0, le=100)
    width: int = Field(default=0, ge=0)
    height: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _check_dimensions(self) -> "ResizeRequest":
        if self.width == 0 and self.height == 0:
            raise ValueError("width and height of image cannot both be unset")
        return self


class CropRegion(BaseModel):
    """Region of the source image kept before scaling."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(gt=0)
    height: int = Field(gt=0)
    x: int = Field(default=0, ge=0)
    y: int = Field(default=0, ge=0)

    def as_box(self) -> tuple[int, int, int, int]:
        """Return the (left, upper, right, lower) box Pillow expects."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)


class ResizePlan(BaseModel):
    """Target dimensions and optional pre-scale crop for one resize."""

    model_config = ConfigDict(frozen=True)

    final_width: int = Field(gt=0)
    final_height: int = Field(gt=0)
    crop: Optional[CropRegion] = None

    @property
    def size(self) -> tuple[int, int]:
        return (self.final_width, self.final_height)


class UploadResult(BaseModel):
    """Location of a published thumbnail."""

    model_config = ConfigDict(frozen=True)

    url: str
    bucket: str
    key: str


class ServiceConfig(BaseModel):
    """Configuration for the thumbnail service, read once at start-up."""

    port: int = Field(gt=0, le=65535)
    bucket: str = Field(min_length=1)
    region: str = Field(min_length=1)
    host: str = "0.0.0.0"
    credentials_profile: str = DEFAULT_CREDENTIALS_PROFILE
    credentials_file: Optional[str] = None
    fetch_timeout: float = Field(default=30.0, gt=0)
    upload_connect_timeout: float = Field(default=10.0, gt=0)
    upload_read_timeout: float = Field(default=60.0, gt=0)
    scratch_dir: Optional[str] = None
    debug: bool = False
