"""
Performance monitoring for image request latencies.
"""

import logging
import statistics
from collections import deque
from typing import Dict, Optional


class PerformanceMonitor:
    """Track image request latencies and flag slow ones."""

    def __init__(
        self,
        slow_threshold_seconds: float = 5.0,
        max_history_size: int = 1000,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize performance monitor.

        Args:
            slow_threshold_seconds: Requests slower than this are logged as warnings
            max_history_size: Maximum number of latencies to keep in history
            logger: Logger for slow-request warnings
        """
        self.slow_threshold = slow_threshold_seconds
        self.logger = logger or logging.getLogger(__name__)
        self.latencies: deque = deque(maxlen=max_history_size)
        self.category_counts: Dict[str, int] = {}

    def record_response_time(
        self,
        category: str,
        duration_seconds: float,
        user_id: Optional[str] = None,
        channel_id: Optional[str] = None,
    ) -> None:
        """
        Record a request duration.

        Args:
            category: Requested image category
            duration_seconds: Request duration in seconds
            user_id: Optional Slack user ID
            channel_id: Optional Slack channel ID
        """
        self.latencies.append(duration_seconds)
        self.category_counts[category] = self.category_counts.get(category, 0) + 1

        if duration_seconds > self.slow_threshold:
            self.logger.warning(
                f"Slow image request: category={category} took {duration_seconds:.2f}s "
                f"(threshold: {self.slow_threshold}s, user={user_id}, channel={channel_id})"
            )

    def get_average_latency(self) -> Optional[float]:
        """Average latency in seconds, or None if nothing was recorded."""
        if not self.latencies:
            return None
        return statistics.mean(self.latencies)

    def get_p95_latency(self) -> Optional[float]:
        """
        Get 95th percentile latency.

        Returns:
            P95 latency in seconds, or None if insufficient data
        """
        if len(self.latencies) < 20:
            # Need at least 20 measurements for meaningful percentile
            return None

        sorted_latencies = sorted(self.latencies)
        index = int(len(sorted_latencies) * 0.95)
        if index >= len(sorted_latencies):
            index = len(sorted_latencies) - 1

        return sorted_latencies[index]

    def log_summary(self) -> None:
        """Log request totals and latency figures."""
        if not self.latencies:
            self.logger.info("No image requests recorded")
            return

        p95 = self.get_p95_latency()
        p95_text = f"{p95:.2f}s" if p95 is not None else "n/a"
        per_category = ", ".join(
            f"{name}={count}" for name, count in sorted(self.category_counts.items())
        )
        self.logger.info(
            f"Image requests: {sum(self.category_counts.values())} "
            f"(avg {self.get_average_latency():.2f}s, p95 {p95_text}; {per_category})"
        )
