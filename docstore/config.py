from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "docstore-service"
    app_env: str = "dev"
    log_level: str = "INFO"

    s3_bucket_name: str = "docstore"
    s3_region: str = "us-east-1"
    s3_endpoint_url: str | None = None
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None

    download_url_expiry_seconds: int = 900
    # single list_objects_v2 call, no continuation
    list_max_keys: int = 1000
    max_upload_size_bytes: int = 50 * 1024 * 1024
    default_page_size: int = 10

    model_config = SettingsConfigDict(env_file=".env", env_prefix="DOCSTORE_")


@lru_cache
def get_settings() -> Settings:
    return Settings()
