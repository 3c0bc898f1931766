"""Pipeline Configuration Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PipelineSettings(BaseSettings):
    """Series pipeline settings with validation and type safety."""

    model_config = SettingsConfigDict(
        env_prefix="ANIME_SERIES_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ============================================================================
    # DIRECTORY LAYOUT
    # ============================================================================

    base_dir: Path = Field(
        default_factory=Path.cwd,
        description="Root directory that relative pipeline directories resolve against",
    )
    data_dir: Path = Field(
        default=Path("data"), description="Directory holding source CSV exports"
    )
    results_dir: Path = Field(
        default=Path("results"),
        description="Directory for converted records and grouping outputs",
    )
    db_dir: Path = Field(
        default=Path("db"), description="Directory for series and split documents"
    )
    logs_dir: Path = Field(default=Path("logs"), description="Directory for log files")

    # ============================================================================
    # ARTIFACT NAMES
    # ============================================================================

    anime_data_file: str = Field(
        default="anilist_anime_data_complete.json",
        description="Converted anime records consumed by the grouping stage",
    )

    # ============================================================================
    # GROUPING
    # ============================================================================

    slug_max_length: int = Field(
        default=30, ge=1, le=200, description="Maximum length of generated series ids"
    )

    # ============================================================================
    # LOGGING CONFIGURATION
    # ============================================================================

    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string",
    )
    log_file: Path | None = Field(
        default=None,
        description="Optional log file; relative paths are placed under logs_dir",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("anime_data_file")
    @classmethod
    def validate_anime_data_file(cls, v: str) -> str:
        """Ensure the anime data file is a bare JSON file name."""
        if not v.endswith(".json"):
            raise ValueError("anime_data_file must be a .json file name")
        if Path(v).name != v:
            raise ValueError("anime_data_file must not contain directory components")
        return v

    @model_validator(mode="after")
    def resolve_directories(self) -> "PipelineSettings":
        """Anchor relative directories at base_dir."""
        self.base_dir = self.base_dir.expanduser()
        for name in ("data_dir", "results_dir", "db_dir", "logs_dir"):
            value: Path = getattr(self, name)
            if not value.is_absolute():
                setattr(self, name, self.base_dir / value)
        if self.log_file is not None and not self.log_file.is_absolute():
            self.log_file = self.logs_dir / self.log_file
        return self

    # ============================================================================
    # ARTIFACT PATHS
    # ============================================================================

    @property
    def anime_data_path(self) -> Path:
        return self.results_dir / self.anime_data_file

    @property
    def series_output_path(self) -> Path:
        return self.results_dir / "main_series.json"

    @property
    def edge_cases_path(self) -> Path:
        return self.results_dir / "edge_cases.json"

    @property
    def updated_anime_path(self) -> Path:
        return self.results_dir / "anime_data_updated.json"

    @property
    def series_db_path(self) -> Path:
        return self.db_dir / "series.json"

    @property
    def split_output_path(self) -> Path:
        return self.db_dir / "advanced_split_series.json"

    def required_directories(self) -> list[Path]:
        """Directories the full pipeline run expects to exist."""
        return [self.data_dir, self.results_dir, self.db_dir, self.logs_dir]


@lru_cache
def get_settings() -> PipelineSettings:
    """Get cached settings instance."""
    return PipelineSettings()
