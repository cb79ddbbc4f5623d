"""Application configuration loaded from environment variables."""

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # Supabase
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    supabase_anon_key: str = ""

    # "supabase" | "memory"
    storage_backend: str = "supabase"

    # Buckets / tables
    videos_bucket: str = "videos"
    thumbnails_bucket: str = "thumbnails"
    videos_table: str = "videos"

    # Processor endpoint (defaults to the hosted function under supabase_url)
    processor_url: str = ""

    # Frame extraction
    ffmpeg_bin: str = "ffmpeg"
    ffmpeg_timeout_sec: Optional[float] = None
    thumbnail_offset_sec: float = 1.0
    thumbnail_quality: int = 2
    temp_dir: Optional[str] = None

    # Uploader
    max_upload_bytes: int = 100 * 1024 * 1024
    message_clear_sec: float = 5.0

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    def resolved_processor_url(self) -> str:
        if self.processor_url:
            return self.processor_url
        return f"{self.supabase_url.rstrip('/')}/functions/v1/video-processor"


settings = Settings()
