"""
Configuration module for loading environment variables.
All tunables for cost estimation and the HTTP layer are read here.
"""
import os


SUPPORTED_PROVIDERS = ("aws", "azure", "gcp")


class Config:
    """Application configuration loaded from environment variables."""

    # Cost estimation
    DEFAULT_CLOUD_PROVIDER: str = os.getenv("DEFAULT_CLOUD_PROVIDER", "aws").lower()
    HOURS_PER_MONTH: int = 730  # Average hours in a month (8760 / 12)
    CURRENCY: str = "USD"
    DEFAULT_STORAGE_GB: int = int(os.getenv("DEFAULT_STORAGE_GB", "100"))
    DEFAULT_STORAGE_CLASS: str = os.getenv("DEFAULT_STORAGE_CLASS", "standard")

    # Request limits
    MAX_REQUEST_BODY_SIZE: int = int(os.getenv("MAX_REQUEST_BODY_SIZE", "1048576"))  # 1 MB
    MAX_DIAGRAM_NODES: int = int(os.getenv("MAX_DIAGRAM_NODES", "500"))
    RATE_LIMIT_PER_MINUTE: int = int(os.getenv("RATE_LIMIT_PER_MINUTE", "60"))
    TRUST_FORWARDED_FOR: bool = os.getenv("TRUST_FORWARDED_FOR", "false").lower() == "true"  # Only behind a trusted proxy

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @classmethod
    def validate(cls) -> None:
        """
        Validates that configuration values are usable.

        Raises:
            ValueError: If any configuration value is missing or invalid.
        """
        if cls.DEFAULT_CLOUD_PROVIDER not in SUPPORTED_PROVIDERS:
            raise ValueError(
                f"DEFAULT_CLOUD_PROVIDER must be one of {', '.join(SUPPORTED_PROVIDERS)} "
                f"(got: {cls.DEFAULT_CLOUD_PROVIDER})"
            )
        if cls.DEFAULT_STORAGE_GB <= 0:
            raise ValueError("DEFAULT_STORAGE_GB must be positive")
        if not cls.DEFAULT_STORAGE_CLASS:
            raise ValueError("DEFAULT_STORAGE_CLASS is required")
        if cls.MAX_REQUEST_BODY_SIZE <= 0:
            raise ValueError("MAX_REQUEST_BODY_SIZE must be positive")
        if cls.MAX_DIAGRAM_NODES <= 0:
            raise ValueError("MAX_DIAGRAM_NODES must be positive")
        if cls.RATE_LIMIT_PER_MINUTE <= 0:
            raise ValueError("RATE_LIMIT_PER_MINUTE must be positive")


config = Config()
