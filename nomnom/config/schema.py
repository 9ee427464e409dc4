"""Configuration schema."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from nomnom.recovery.error_types import OperationKind
from nomnom.recovery.retry import RetryConfig


class RetrySettings(BaseModel):
    """A named preset, optionally with individual fields overridden."""

    preset: Literal["quick", "standard", "persistent"] | None = None
    max_attempts: int | None = Field(default=None, ge=1)
    initial_delay_ms: int | None = Field(default=None, ge=0)
    max_delay_ms: int | None = Field(default=None, ge=0)
    backoff_multiplier: float | None = Field(default=None, ge=1.0)
    exponential_backoff: bool | None = None

    def to_retry_config(self, base: RetryConfig = RetryConfig.STANDARD) -> RetryConfig:
        """Build a RetryConfig from the preset (or ``base``) plus overrides."""
        config = RetryConfig.preset(self.preset) if self.preset else base
        overrides = self.model_dump(exclude={"preset"}, exclude_none=True)
        if not overrides:
            return config
        return RetryConfig(
            max_attempts=overrides.get("max_attempts", config.max_attempts),
            initial_delay_ms=overrides.get("initial_delay_ms", config.initial_delay_ms),
            max_delay_ms=overrides.get("max_delay_ms", config.max_delay_ms),
            backoff_multiplier=overrides.get("backoff_multiplier", config.backoff_multiplier),
            exponential_backoff=overrides.get("exponential_backoff", config.exponential_backoff),
        )


class RecoverySettings(BaseModel):
    enable_logging: bool = True
    defaults: RetrySettings = Field(default_factory=lambda: RetrySettings(preset="standard"))
    operations: dict[str, RetrySettings] = Field(default_factory=dict)

    @field_validator("operations")
    @classmethod
    def _known_kinds(cls, value: dict[str, RetrySettings]) -> dict[str, RetrySettings]:
        known = {kind.value for kind in OperationKind}
        unknown = sorted(set(value) - known)
        if unknown:
            raise ValueError(f"unknown operation kind(s): {', '.join(unknown)}")
        return value

    @model_validator(mode="after")
    def _policies_resolve(self) -> "RecoverySettings":
        defaults = self.defaults.to_retry_config()
        for settings in self.operations.values():
            settings.to_retry_config(base=defaults)
        return self


class Config(BaseModel):
    """Root configuration for nomnom."""

    recovery: RecoverySettings = Field(default_factory=RecoverySettings)

    def retry_config_for(self, kind: OperationKind) -> RetryConfig:
        """Resolve the retry policy for one operation kind."""
        defaults = self.recovery.defaults.to_retry_config()
        override = self.recovery.operations.get(kind.value)
        if override is None:
            return defaults
        return override.to_retry_config(base=defaults)
