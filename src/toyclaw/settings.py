# src/toyclaw/settings.py
"""Behavioral settings for toyclaw.

Settings apply regardless of which provider is used. The library itself
never reads the environment; config.py merges TOYCLAW_* variables and the
YAML file into a Settings instance for the CLI.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator

# Embedding rate limit profiles for the index builder
RATE_LIMIT_PROFILES: dict[str, dict[str, Any]] = {
    "aggressive": {
        "embedding_batch_size": 50,
        "embedding_batch_delay": 0.0,
    },
    "conservative": {
        "embedding_batch_size": 10,
        "embedding_batch_delay": 2.0,
    },
}


class Settings(BaseModel):
    """Behavioral settings for the compliance pipeline.

    Example:
        settings = Settings(default_top_k=5, generation_temperature=0.0)

        # Or a rate limit profile for free embedding tiers
        settings = Settings.with_profile("conservative")
    """

    # Chunking
    chunk_max_chars: int = Field(default=2000, gt=0)
    chunk_overlap_chars: int = Field(default=200, ge=0)
    min_chunk_chars: int = Field(default=50, ge=0)
    pdf_backend: Literal["pypdf", "pdfplumber"] = "pypdf"

    # Index build embedding
    embedding_batch_size: int = Field(default=20, ge=1)
    embedding_batch_delay: float = Field(default=0.5, ge=0)  # seconds between batches

    # Retrieval
    default_top_k: int = Field(default=10, ge=1)

    # Report generation
    generation_temperature: float = Field(default=0.2, ge=0)
    max_generation_attempts: int = Field(default=2, ge=1)

    # Every outbound provider call
    provider_timeout: float = Field(default=30.0, gt=0)  # seconds
    num_retries: int = Field(default=0, ge=0)  # LiteLLM transport retries

    @model_validator(mode="after")
    def _check_overlap(self) -> Settings:
        if self.chunk_overlap_chars * 2 >= self.chunk_max_chars:
            raise ValueError("chunk_overlap_chars must be less than half of chunk_max_chars")
        return self

    @classmethod
    def with_profile(
        cls,
        profile: Literal["aggressive", "conservative"],
        **overrides: Any,
    ) -> Settings:
        """Create Settings with an embedding rate limit profile.

        Args:
            profile: "aggressive" for paid tiers, "conservative" for free tiers.
            **overrides: Additional settings to override profile defaults.
        """
        if profile not in RATE_LIMIT_PROFILES:
            raise ValueError(
                f"Unknown profile '{profile}'. "
                f"Available profiles: {list(RATE_LIMIT_PROFILES.keys())}"
            )

        profile_settings: dict[str, Any] = RATE_LIMIT_PROFILES[profile].copy()
        profile_settings.update(overrides)
        return cls(**profile_settings)
