"""
Wiring Configuration

Timeouts, resolution concurrency and observability settings for a wiring run.
The core never reads the environment itself: callers build a WiringConfig
(optionally via from_env) and pass it to GraphBuilder and TransactionExecutor.
"""

import os
import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class WiringConfig:
    """
    Wiring run settings.

    Attributes:
        confirmation_timeout: Seconds to wait for a transaction confirmation
        resolution_concurrency: Maximum concurrent contract resolutions
            during a graph build
        log_level: Level name used by create_logger
        service_name: Service name reported to the tracing backend
        otlp_endpoint: OTLP collector endpoint, tracing export disabled if None
        console_spans: Also export spans to the console
    """

    confirmation_timeout: float = 120.0
    resolution_concurrency: int = 8
    log_level: str = "INFO"
    service_name: str = "omnigraph-wiring"
    otlp_endpoint: Optional[str] = None
    console_spans: bool = False

    def validate(self) -> None:
        """Validate settings."""
        if self.confirmation_timeout <= 0:
            raise ValueError("confirmation_timeout must be positive")
        if self.resolution_concurrency < 1:
            raise ValueError("resolution_concurrency must be at least 1")
        if logging.getLevelName(self.log_level.upper()) == f"Level {self.log_level.upper()}":
            raise ValueError(f"Unknown log level: {self.log_level}")

    @classmethod
    def from_env(cls) -> "WiringConfig":
        """Create config from environment variables"""
        config = cls(
            confirmation_timeout=float(os.getenv("OMNIGRAPH_CONFIRMATION_TIMEOUT", "120")),
            resolution_concurrency=int(os.getenv("OMNIGRAPH_RESOLUTION_CONCURRENCY", "8")),
            log_level=os.getenv("OMNIGRAPH_LOG_LEVEL", "INFO"),
            service_name=os.getenv("OMNIGRAPH_SERVICE_NAME", "omnigraph-wiring"),
            otlp_endpoint=os.getenv("OMNIGRAPH_OTLP_ENDPOINT") or None,
            console_spans=os.getenv("OMNIGRAPH_CONSOLE_SPANS", "false").lower()
            in ("true", "1", "yes", "on"),
        )
        config.validate()
        logger.debug(f"Loaded wiring config from environment: {config}")
        return config
