import json
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode

StrList = Annotated[list[str], NoDecode]


class Settings(BaseSettings):
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    max_upload_size_mb: int = 5
    allowed_image_types: StrList = ["image/jpeg", "image/png", "image/webp"]
    cors_origins: StrList = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]
    debug: bool = False
    log_level: str = "INFO"

    # Attributes averaged into the overall score; the rest are informational
    scorable_attributes: StrList = ["eyes", "gills", "slime", "flesh", "texture"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "protected_namespaces": ("settings_",)}

    @field_validator("allowed_image_types", "cors_origins", "scorable_attributes", mode="before")
    @classmethod
    def _parse_list(cls, value):
        """Accept list env vars as a comma-separated string or a JSON list."""
        if not isinstance(value, str):
            return value
        if value.startswith("["):
            return json.loads(value)
        return [item.strip() for item in value.split(",") if item.strip()]


settings = Settings()
