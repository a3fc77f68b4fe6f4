"""Tracking of anomalies absorbed while reading and writing orders."""

from collections import defaultdict
from typing import Dict, List, Optional, Set
import logging


class ErrorTracker:
    """Track and aggregate anomalies that were recovered with a safe default.

    Kinds used by this package:
        STORAGE_CORRUPT: stored collection unreadable, treated as empty
        INVALID_RECORD: stored element dropped (not an object or no id)
        MALFORMED_NUMERIC_INPUT: numeric field coerced to 0
    """

    def __init__(self, max_samples: int = 3):
        """Initialize error tracker.

        Args:
            max_samples: Maximum number of samples to keep per kind
        """
        self.error_counts: Dict[str, int] = defaultdict(int)
        self.error_samples: Dict[str, List[Dict]] = defaultdict(list)
        self.max_samples = max_samples
        self.seen_errors: Set[str] = set()

    def add_error(self, error_type: str, message: str, context: Optional[Dict] = None) -> None:
        """Record an anomaly; repeats of the same message are counted once."""
        error_key = f"{error_type}:{message}:{sorted((context or {}).items())}"
        if error_key in self.seen_errors:
            return
        self.seen_errors.add(error_key)
        self.error_counts[error_type] += 1
        if len(self.error_samples[error_type]) < self.max_samples:
            self.error_samples[error_type].append({
                'message': message,
                'context': context or {}
            })

    @property
    def total(self) -> int:
        """Number of distinct anomalies recorded."""
        return sum(self.error_counts.values())

    def count(self, error_type: str) -> int:
        return self.error_counts.get(error_type, 0)

    def get_summary(self) -> Dict:
        """Get anomaly counts and samples."""
        return {
            'counts': dict(self.error_counts),
            'samples': dict(self.error_samples)
        }

    def log_summary(self, logger: logging.Logger) -> None:
        """Log the anomaly summary as warnings."""
        if not self.error_counts:
            return

        logger.warning("Recovered anomalies:")
        for error_type, count in self.error_counts.items():
            logger.warning(f"  {error_type} ({count} occurrences)")
            for sample in self.error_samples[error_type]:
                logger.warning(f"    - {sample['message']}")
                for key, value in sample['context'].items():
                    logger.warning(f"      {key}: {value}")
