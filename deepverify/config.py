"""
Central application configuration.

Every tunable value lives here as a typed, documented field.
Any field can be overridden at runtime via an environment variable of the
same name (case-insensitive), e.g.:

    TEXT_ANALYSIS_DELAY_SEC=0 uvicorn deepverify.main:app    # instant demo
    export MAX_IMAGE_UPLOAD_MB=10                            # staging override

A `.env` file at the project root is loaded automatically.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ------------------------------------------------------------------ #
    # Mock analysis                                                       #
    # ------------------------------------------------------------------ #
    text_analysis_delay_sec: float = Field(
        2.0, description="Simulated latency before a text verdict is delivered"
    )
    image_analysis_delay_sec: float = Field(
        2.5, description="Simulated latency before an image verdict is delivered"
    )
    text_confidence_floor: float = Field(
        70.0, description="Text confidence is drawn from (floor, 100]"
    )
    image_confidence_floor: float = Field(
        75.0, description="Image confidence is drawn from (floor, 100]"
    )
    image_fake_probability: float = Field(
        0.4, description="Chance that an image draw comes back FAKE"
    )

    # ------------------------------------------------------------------ #
    # File Size Limits                                                    #
    # ------------------------------------------------------------------ #
    max_image_upload_mb: int = Field(
        5, description="Max MB for a single image upload"
    )
    allowed_image_extensions: list[str] = Field(
        [".png", ".jpg", ".jpeg", ".webp", ".gif", ".bmp"],
        description="Extensions accepted by the image upload surface",
    )

    # ------------------------------------------------------------------ #
    # Auth / navigation                                                   #
    # ------------------------------------------------------------------ #
    auth_entry_path: str = Field(
        "/auth", description="Where clients are sent when no session exists"
    )
    check_revoked_tokens: bool = Field(
        True, description="Ask the identity provider whether an ID token was revoked"
    )
    page_idle_ttl_sec: int = Field(
        1800, description="Mounted pages untouched for this long are torn down"
    )

    # ------------------------------------------------------------------ #
    # Rate Limiting                                                       #
    # ------------------------------------------------------------------ #
    analysis_rate_window_sec: int = Field(
        60, description="Sliding window for per-user analyze calls (seconds)"
    )
    analysis_rate_max_requests: int = Field(
        20, description="Max analyze calls allowed within the window"
    )
    rate_limit_memory_limit: int = Field(
        1000, description="Max keys before in-memory rate-limit map is pruned"
    )

    # ------------------------------------------------------------------ #
    # Integrations                                                        #
    # ------------------------------------------------------------------ #
    firebase_service_account: str = Field(
        "", description="Service-account JSON; empty means Application Default Credentials"
    )
    upstash_redis_host: str = Field(
        "", description="Upstash REST URL; empty disables Redis"
    )
    upstash_redis_password: str = Field(
        "", description="Upstash REST token"
    )

    # ------------------------------------------------------------------ #
    # CORS                                                                #
    # ------------------------------------------------------------------ #
    cors_allow_origins: list[str] = Field(
        ["*"], description="Origins allowed to call the API"
    )

    @property
    def max_image_upload_bytes(self) -> int:
        return self.max_image_upload_mb * 1024 * 1024


# Single shared instance. Import this everywhere.
settings = Settings()
