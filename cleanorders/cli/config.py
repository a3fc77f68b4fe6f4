"""
Configuration management for the order service.
Handles loading and validating configuration from environment variables and files.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Optional
from pathlib import Path
from dotenv import load_dotenv

from ..orders.order import DEFAULT_STATUS_RANKS
from ..processors.limiter import DEFAULT_MAX_ACTIVE_PER_CLIENT
from ..store.record_store import DEFAULT_STORAGE_KEY
from ..utils.normalization import FOLD_STRATEGIES

DEFAULT_DATABASE_URL = 'sqlite:///cleanorders.db'

@dataclass
class Config:
    """Configuration settings for the order service."""

    # Storage settings
    database_url: str = DEFAULT_DATABASE_URL
    storage_key: str = DEFAULT_STORAGE_KEY

    # Order rules
    max_active_per_client: int = DEFAULT_MAX_ACTIVE_PER_CLIENT
    ready_grace_seconds: float = 5.0
    status_ranks: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_STATUS_RANKS))

    # Search settings
    fold_strategy: str = 'unicode'

    # Logging settings
    log_level: str = 'INFO'
    log_dir: Optional[Path] = None

    # Output settings
    output_format: str = 'text'  # text, json, csv

    @property
    def ready_grace_ms(self) -> int:
        return int(self.ready_grace_seconds * 1000)

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> 'Config':
        """Create configuration from environment variables.

        Args:
            env_file: Optional path to .env file

        Returns:
            Config: Configuration instance

        Raises:
            ValueError: If a numeric variable cannot be parsed
        """
        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()

        return cls(
            database_url=os.getenv('DATABASE_URL', DEFAULT_DATABASE_URL),
            storage_key=os.getenv('STORAGE_KEY', DEFAULT_STORAGE_KEY),
            max_active_per_client=int(os.getenv('MAX_ACTIVE_PER_CLIENT', str(DEFAULT_MAX_ACTIVE_PER_CLIENT))),
            ready_grace_seconds=float(os.getenv('READY_GRACE_SECONDS', '5')),
            fold_strategy=os.getenv('FOLD_STRATEGY', 'unicode'),
            log_level=os.getenv('LOG_LEVEL', 'INFO'),
            log_dir=Path(os.getenv('LOG_DIR', 'logs')) if os.getenv('LOG_DIR') else None,
            output_format=os.getenv('OUTPUT_FORMAT', 'text')
        )

    def validate(self) -> bool:
        """Validate configuration settings.

        Returns:
            bool: True if configuration is valid
        """
        # Validate log directory exists if specified
        if self.log_dir and not self.log_dir.exists():
            try:
                self.log_dir.mkdir(parents=True, exist_ok=True)
            except Exception as e:
                raise ValueError(f"Failed to create log directory: {e}")

        if not self.database_url:
            raise ValueError("database_url is required")
        if not self.storage_key:
            raise ValueError("storage_key is required")

        # Validate numeric values
        if self.max_active_per_client <= 0:
            raise ValueError("max_active_per_client must be positive")
        if self.ready_grace_seconds < 0:
            raise ValueError("ready_grace_seconds must not be negative")

        # Ranks must be strictly increasing along the workflow
        ranks = list(self.status_ranks.values())
        if len(set(ranks)) != len(ranks) or any(rank <= 0 for rank in ranks):
            raise ValueError("status_ranks must be distinct positive integers")

        if self.fold_strategy not in FOLD_STRATEGIES:
            raise ValueError(f"fold_strategy must be one of: {', '.join(FOLD_STRATEGIES)}")

        # Validate output format
        valid_formats = ['text', 'json', 'csv']
        if self.output_format not in valid_formats:
            raise ValueError(f"output_format must be one of: {', '.join(valid_formats)}")

        return True
