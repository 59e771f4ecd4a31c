"""Application configuration management."""
from pathlib import Path
from typing import List, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import json


# Keys of the legacy .b2-config.json file mapped onto settings fields
LEGACY_B2_KEYS = {
    "application_key_id": "b2_application_key_id",
    "application_key": "b2_application_key",
    "bucket_name": "b2_bucket_name",
    "bucket_id": "b2_bucket_id",
    "use_cdn": "b2_use_cdn",
    "cdn_domain": "b2_cdn_domain",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Static site checkout
    site_root: Path = Field(default=Path("."), description="Root of the static blog checkout")
    posts_dir: Optional[Path] = Field(default=None, description="Markdown posts directory")
    data_dir: Optional[Path] = Field(default=None, description="Album descriptor directory")
    album_order_file: Optional[Path] = Field(default=None, description="Manual album order file")

    # Post front matter defaults
    post_layout: str = Field(default="post", description="Layout written to new posts")
    post_category: str = Field(default="virtual-photography", description="Category written to posts")
    default_description: str = Field(
        default="Virtual Photography",
        description="Description used when an album has none"
    )

    # Remote storage (Backblaze B2)
    b2_application_key_id: str = Field(default="", description="B2 application key ID")
    b2_application_key: str = Field(default="", description="B2 application key")
    b2_bucket_name: str = Field(default="", description="B2 bucket name")
    b2_bucket_id: Optional[str] = Field(
        default=None,
        description="B2 bucket ID (required for keys that cannot list buckets)"
    )
    b2_use_cdn: bool = Field(default=False, description="Serve public URLs through the CDN domain")
    b2_cdn_domain: Optional[str] = Field(default=None, description="CDN domain in front of the bucket")
    b2_download_host: str = Field(default="f003.backblazeb2.com", description="B2 download host")
    b2_api_url: str = Field(default="https://api.backblazeb2.com", description="B2 API base URL")
    b2_auth_ttl_hours: float = Field(default=23, description="Hours before re-authorizing")
    b2_timeout_seconds: float = Field(default=60.0, description="HTTP timeout for B2 calls")
    b2_config_file: Optional[Path] = Field(
        default=None,
        description="Legacy JSON credentials file (defaults to <site_root>/.b2-config.json)"
    )

    # Uploads
    max_upload_size_mb: int = Field(default=50, description="Max size of a single uploaded image")
    max_upload_files: int = Field(default=100, description="Max images per upload request")
    allowed_content_types: List[str] = Field(
        default=["image/jpeg", "image/png", "image/webp"],
        description="Accepted upload content types"
    )

    # Encoding
    jpeg_quality: int = Field(default=95, description="JPEG quality for re-encoded originals")
    thumbnail_width: int = Field(default=600, description="Max thumbnail width")
    thumbnail_quality: int = Field(default=85, description="WebP thumbnail quality")

    # API
    api_host: str = Field(default="127.0.0.1", description="API host")
    api_port: int = Field(default=3001, description="API port")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: Optional[Path] = Field(default=None, description="Log file path")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("allowed_content_types", mode="before")
    @classmethod
    def parse_content_types(cls, v):
        """Parse allowed content types from string or list."""
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [t.strip() for t in v.split(",") if t.strip()]
        return v

    def __init__(self, **kwargs):
        """Initialize settings and resolve all paths."""
        super().__init__(**kwargs)
        self.site_root = self.site_root.resolve()
        self.posts_dir = (self.posts_dir or self.site_root / "_posts").resolve()
        self.data_dir = (
            self.data_dir or self.site_root / "_data" / "virtual-photography"
        ).resolve()
        self.album_order_file = (
            self.album_order_file or self.data_dir / "_album-order.json"
        ).resolve()
        self.b2_config_file = (
            self.b2_config_file or self.site_root / ".b2-config.json"
        ).resolve()

        if self.log_file:
            self.log_file = self.log_file.resolve()

        self._apply_legacy_b2_config()

    def _apply_legacy_b2_config(self):
        """Fill unset remote storage fields from the legacy credentials file."""
        if not self.b2_config_file.is_file():
            return

        with open(self.b2_config_file, encoding="utf-8") as f:
            legacy = json.load(f)

        for legacy_key, field_name in LEGACY_B2_KEYS.items():
            if field_name in self.model_fields_set or legacy.get(legacy_key) is None:
                continue
            setattr(self, field_name, legacy[legacy_key])

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    @property
    def storage_configured(self) -> bool:
        """Whether enough remote storage settings are present to authorize."""
        return bool(
            self.b2_application_key_id
            and self.b2_application_key
            and (self.b2_bucket_id or self.b2_bucket_name)
        )

    def ensure_directories_exist(self):
        """Create the posts and data directories if they don't exist."""
        for directory in [self.posts_dir, self.data_dir]:
            directory.mkdir(parents=True, exist_ok=True)

        # Create logs directory if log_file is specified
        if self.log_file:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)


settings = Settings()
