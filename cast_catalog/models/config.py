"""
Pydantic model for application configuration.
Provides validation for all settings.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_REQUEST_TIMEOUT = 30.0


class CatalogConfig(BaseModel):
    """A validated configuration model for the application."""

    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)

    manifest_url: str
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    json_logs: bool = False

    # Internal fields not loaded from INI file
    config_path: str = Field(..., repr=False)

    @field_validator("manifest_url")
    @classmethod
    def validate_manifest_url(cls, v: str) -> str:
        """Only http(s) manifests can be fetched."""
        if not v:
            raise ValueError("Manifest URL cannot be empty.")
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Manifest URL must start with http:// or https://: {v}")
        return v

    @field_validator("request_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v < 1 or v > 300:
            raise ValueError("Request timeout must be between 1 and 300 seconds.")
        return v

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"config_path"}
        return {key for key in cls.model_fields if key not in internal_fields}
