"""Pydantic schemas for configuration validation."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CsvConfig(BaseModel):
    """Timing export format."""

    delimiter: str = Field(default=";", min_length=1, max_length=1)
    encoding: str = Field(default="utf-8", min_length=1)


class OutputConfig(BaseModel):
    """Output document writing."""

    indent: int = Field(ge=0, le=8, default=2)
    validate_schema: bool = True
    create_backup: bool = False


class BatchConfig(BaseModel):
    """Directory batch mode."""

    pattern: str = Field(default="*.csv", min_length=1)


class LoggingConfig(BaseModel):
    """Log output for the command-line entry point."""

    level: str = "INFO"
    format: str = Field(default="%(levelname)s: %(message)s", min_length=1)

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class AppConfig(BaseModel):
    """Top-level preprocessor configuration."""

    model_config = ConfigDict(extra="allow")

    csv: CsvConfig = Field(default_factory=CsvConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    batch: BatchConfig = Field(default_factory=BatchConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    events: dict[str, str] = Field(default_factory=dict)


def validate_config(config_dict: dict) -> AppConfig:
    """
    Validate configuration dictionary against schema.

    Args:
        config_dict: Raw configuration dictionary from YAML

    Returns:
        Validated configuration object

    Raises:
        ValidationError: If configuration is invalid
    """
    return AppConfig(**config_dict)
