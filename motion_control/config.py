"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    # Inference provider
    replicate_api_token: Optional[str] = None

    # Server
    host: str = "0.0.0.0"
    port: int = 5000
    allowed_origins: List[str] = ["*"]
    log_level: str = "INFO"

    # Upload storage
    upload_dir: str = "uploads"
    uploads_mount_path: str = "/uploads"
    public_base_url: Optional[str] = None  # e.g. "https://api.example.com"
    max_upload_mb: int = 500

    # Generation model (fixed per deployment, not caller-controlled)
    model_ref: str = (
        "lucataco/animate-diff:"
        "1531004ee4c98894ab11f62a7e6b40edd9ccc75c97974f1fd2f3a98ecc8c85f9"
    )
    seed: int = 255224557
    steps: int = 25
    guidance_scale: float = 7.5
    motion_module: str = "mm_sd_v14"
    negative_prompt: str = (
        "badhandv4, easynegative, ng_deepnegative_v1_75t, "
        "verybadimagenegative_v1.3, bad-artist, bad_prompt_version2-neg, teeth"
    )
    default_prompt: str = "high quality, best quality"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "protected_namespaces": (),
    }

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


settings = Settings()
