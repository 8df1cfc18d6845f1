"""
Factory for creating the analytics module.
"""
from pathlib import Path

from .aggregator import AggregationEngine
from .rate_limiter import RateLimiter
from .recorder import EventRecorder
from .routes import create_analytics_blueprint
from .session_store import SessionStore


def create_analytics_module(
    data_dir: Path,
    rate_limit_max_requests: int = 100,
    rate_limit_window_seconds: float = 60,
    default_dashboard_days: int = 30,
    top_pages_limit: int = 10,
) -> dict:
    """Create analytics module with services and routes.

    Args:
        data_dir: Directory to store analytics data files
        rate_limit_max_requests: Write requests allowed per client per window
        rate_limit_window_seconds: Length of the rate limit window
        default_dashboard_days: Dashboard window when none is requested
        top_pages_limit: Number of pages reported in top-pages lists

    Returns:
        Dictionary containing the store, recorder, aggregator, rate limiter and blueprint
    """
    store = SessionStore(data_dir)
    recorder = EventRecorder(store)
    aggregator = AggregationEngine(store, top_pages_limit=top_pages_limit)
    rate_limiter = RateLimiter(rate_limit_max_requests, rate_limit_window_seconds)

    blueprint = create_analytics_blueprint(
        recorder=recorder,
        aggregator=aggregator,
        rate_limiter=rate_limiter,
        default_days=default_dashboard_days,
    )

    return {
        "store": store,
        "recorder": recorder,
        "aggregator": aggregator,
        "rate_limiter": rate_limiter,
        "blueprint": blueprint,
    }
