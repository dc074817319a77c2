"""Configuration for the carrierfreq server, loaded from environment variables."""

import os
from dataclasses import dataclass

from .constants import (
    CLINGEN_API_URL,
    DEFAULT_CARRIER_FREQUENCY,
    DEFAULT_FOUNDER_EFFECT_MULTIPLIER,
    DEFAULT_FREQUENCY_DECIMAL_PLACES,
    DEFAULT_GNOMAD_VERSION,
    DEFAULT_HOST,
    DEFAULT_LOG_LEVEL,
    DEFAULT_LOW_SAMPLE_SIZE_THRESHOLD,
    DEFAULT_PORT,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_SUBMISSIONS_BATCH_SIZE,
    DEFAULT_TRANSPORT,
    GNOMAD_API_URL,
    VALID_TRANSPORTS,
)
from .populations import available_versions

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class CarrierFreqConfig:
    """Server configuration loaded from environment variables."""

    # gnomAD settings
    gnomad_version: str = DEFAULT_GNOMAD_VERSION
    api_url: str = GNOMAD_API_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS
    submissions_batch_size: int = DEFAULT_SUBMISSIONS_BATCH_SIZE

    # ClinGen settings
    clingen_api_url: str = CLINGEN_API_URL

    # Calculation settings
    founder_effect_multiplier: float = DEFAULT_FOUNDER_EFFECT_MULTIPLIER
    low_sample_size_threshold: int = DEFAULT_LOW_SAMPLE_SIZE_THRESHOLD
    default_carrier_frequency: float = DEFAULT_CARRIER_FREQUENCY
    frequency_decimal_places: int = DEFAULT_FREQUENCY_DECIMAL_PLACES

    # Transport settings
    transport: str = DEFAULT_TRANSPORT
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self) -> None:
        """Validate config values."""
        if self.gnomad_version not in available_versions():
            raise ValueError(
                f"gnomad_version must be one of {available_versions()}, got '{self.gnomad_version}'"
            )

        if not self.api_url.startswith(("http://", "https://")):
            raise ValueError(f"api_url must be an http(s) URL, got '{self.api_url}'")

        if not self.clingen_api_url.startswith(("http://", "https://")):
            raise ValueError(
                f"clingen_api_url must be an http(s) URL, got '{self.clingen_api_url}'"
            )

        if self.request_timeout <= 0:
            raise ValueError(f"request_timeout must be positive, got {self.request_timeout}")

        if self.submissions_batch_size < 1:
            raise ValueError(
                f"submissions_batch_size must be at least 1, got {self.submissions_batch_size}"
            )

        if self.founder_effect_multiplier <= 0:
            raise ValueError(
                f"founder_effect_multiplier must be positive, got {self.founder_effect_multiplier}"
            )

        if self.low_sample_size_threshold < 0:
            raise ValueError(
                "low_sample_size_threshold must be non-negative, "
                f"got {self.low_sample_size_threshold}"
            )

        if not 0 < self.default_carrier_frequency <= 1:
            raise ValueError(
                "default_carrier_frequency must be in (0, 1], "
                f"got {self.default_carrier_frequency}"
            )

        if not 0 <= self.frequency_decimal_places <= 10:
            raise ValueError(
                "frequency_decimal_places must be between 0 and 10, "
                f"got {self.frequency_decimal_places}"
            )

        if self.transport not in VALID_TRANSPORTS:
            raise ValueError(f"transport must be one of {VALID_TRANSPORTS}, got '{self.transport}'")

        if not 1 <= self.port <= 65535:
            raise ValueError(f"port must be between 1 and 65535, got {self.port}")

        self.log_level = self.log_level.upper()
        if self.log_level not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {VALID_LOG_LEVELS}, got '{self.log_level}'")

    @classmethod
    def from_env(cls) -> "CarrierFreqConfig":
        """Create config from environment variables."""
        env = os.environ

        return cls(
            gnomad_version=env.get("CARRIERFREQ_GNOMAD_VERSION", DEFAULT_GNOMAD_VERSION),
            api_url=env.get("CARRIERFREQ_API_URL", GNOMAD_API_URL),
            request_timeout=float(
                env.get("CARRIERFREQ_REQUEST_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT_SECONDS))
            ),
            submissions_batch_size=int(
                env.get("CARRIERFREQ_SUBMISSIONS_BATCH_SIZE", str(DEFAULT_SUBMISSIONS_BATCH_SIZE))
            ),
            clingen_api_url=env.get("CARRIERFREQ_CLINGEN_API_URL", CLINGEN_API_URL),
            founder_effect_multiplier=float(
                env.get(
                    "CARRIERFREQ_FOUNDER_EFFECT_MULTIPLIER", str(DEFAULT_FOUNDER_EFFECT_MULTIPLIER)
                )
            ),
            low_sample_size_threshold=int(
                env.get(
                    "CARRIERFREQ_LOW_SAMPLE_SIZE_THRESHOLD", str(DEFAULT_LOW_SAMPLE_SIZE_THRESHOLD)
                )
            ),
            default_carrier_frequency=float(
                env.get("CARRIERFREQ_DEFAULT_CARRIER_FREQUENCY", str(DEFAULT_CARRIER_FREQUENCY))
            ),
            frequency_decimal_places=int(
                env.get(
                    "CARRIERFREQ_FREQUENCY_DECIMAL_PLACES", str(DEFAULT_FREQUENCY_DECIMAL_PLACES)
                )
            ),
            transport=env.get("CARRIERFREQ_TRANSPORT", DEFAULT_TRANSPORT),
            host=env.get("CARRIERFREQ_HOST", DEFAULT_HOST),
            port=int(env.get("CARRIERFREQ_PORT", str(DEFAULT_PORT))),
            log_level=env.get("CARRIERFREQ_LOG_LEVEL", DEFAULT_LOG_LEVEL),
        )
