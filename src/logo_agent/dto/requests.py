"""Request DTOs for API endpoints."""

from pydantic import BaseModel, Field, field_validator

# Upload limits enforced by the HTTP layer before bytes reach the cache
MAX_UPLOAD_BYTES = 5 * 1024 * 1024
UPLOAD_CONTENT_TYPE_PREFIX = "image/"


class LogoRequest(BaseModel):
    """Request DTO for acquiring one brand logo.

    The handler will convert this to internal calls to the service layer.
    """

    brand: str = Field(..., description="Brand name, alias or native-language name", min_length=1)
    refresh: bool = Field(False, description="Bypass the cache and fetch again")


class BatchLogoRequest(BaseModel):
    """Request DTO for acquiring several brand logos."""

    brands: list[str] = Field(..., description="Brand names", min_length=1)
    refresh: bool = Field(False, description="Bypass the cache and fetch again")

    @field_validator("brands", mode="before")
    @classmethod
    def split_brands(cls, value: object) -> object:
        """Accept a comma separated string as well as a list."""
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value
