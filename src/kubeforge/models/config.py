"""Compiler configuration models."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StateConfig(BaseModel):
    """Identifier store configuration."""
    path: str = Field(default="./state/identifiers.yaml")


class CompilerConfig(BaseModel):
    """Main configuration model."""
    model_config = ConfigDict(extra="ignore")

    log_level: str = Field(default="INFO")
    security_hardening: bool = Field(
        default=True,
        description="Container-level allowPrivilegeEscalation=false and read-only root filesystem",
    )
    binary_content: bool = Field(
        default=True,
        description="Accept binaryContent files",
    )
    state: StateConfig = Field(default_factory=StateConfig)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()
