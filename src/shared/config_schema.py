"""Configuration schema with Pydantic for type safety and validation."""

from pydantic import BaseModel, ConfigDict, Field

# The server cadence the original timings were expressed in
TICKS_PER_SECOND = 20


class UpdaterConfig(BaseModel):
    """Ban-list updater settings, keyed by their ``config.yml`` names."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    # Not validated here: a bad URL must still let the updater fall back to backup
    banlist_url: str = Field(default="", alias="banlist-url")
    retries: int = Field(default=3, ge=1)
    max_bandwidth: int = Field(
        default=64, ge=1, alias="max-bandwidth", description="KB/s"
    )
    timeout: int = Field(default=5, ge=1, description="seconds")
    auto_check_interval: int = Field(
        default=10, ge=0, alias="auto-check-interval", description="minutes"
    )

    @property
    def buffer_size(self) -> int:
        """Bytes read per chunk, one tick's worth of ``max_bandwidth``."""
        return (self.max_bandwidth * 1024) // TICKS_PER_SECOND

    @property
    def deadline_ticks(self) -> int:
        return self.timeout * TICKS_PER_SECOND

    @property
    def deadline_seconds(self) -> float:
        return self.deadline_ticks / TICKS_PER_SECOND

    @property
    def interval_seconds(self) -> int:
        return self.auto_check_interval * 60
