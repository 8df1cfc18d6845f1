"""
Analytics Routes

Flask routes for the analytics tracking and dashboard endpoints.
"""

import logging
from functools import wraps
from typing import Callable

from flask import Blueprint, jsonify, request
from werkzeug.exceptions import HTTPException

from .aggregator import AggregationEngine
from .errors import AnalyticsError, StorageUnavailable, ValidationError
from .rate_limiter import RATE_LIMIT_MESSAGE, RateLimiter, get_client_ip
from .recorder import EventRecorder
from .schemas import ActionPayload, PageViewPayload, VisitPayload, parse_payload

logger = logging.getLogger(__name__)


def parse_days(raw, default: int) -> int:
    """Parse the ``days`` query parameter; reject anything but a positive integer."""
    if raw is None or raw == "":
        return default
    try:
        days = int(raw)
    except (TypeError, ValueError):
        raise ValidationError("days must be a positive integer", ["days: must be a positive integer"])
    if days <= 0:
        raise ValidationError("days must be a positive integer", ["days: must be a positive integer"])
    return days


def create_analytics_blueprint(
    recorder: EventRecorder,
    aggregator: AggregationEngine,
    rate_limiter: RateLimiter,
    default_days: int = 30,
) -> Blueprint:
    """Create analytics blueprint with routes.

    Args:
        recorder: Event recorder handling the write endpoints
        aggregator: Aggregation engine backing the dashboard endpoints
        rate_limiter: Gate applied to the write endpoints
        default_days: Dashboard window when ``days`` is not given

    Returns:
        Flask blueprint with analytics routes
    """
    blueprint = Blueprint('analytics', __name__, url_prefix='/api/analytics')

    def rate_limited(f: Callable) -> Callable:
        """Decorator rejecting clients over the request budget."""
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not rate_limiter.allow(get_client_ip()):
                return jsonify({'error': RATE_LIMIT_MESSAGE}), 429
            return f(*args, **kwargs)
        return decorated_function

    @blueprint.errorhandler(AnalyticsError)
    def handle_analytics_error(error: AnalyticsError):
        if isinstance(error, StorageUnavailable):
            logger.error(f"{request.method} {request.path} failed: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @blueprint.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        if isinstance(error, HTTPException):
            return error
        logger.exception(f"Unexpected error on {request.method} {request.path}")
        return jsonify({'success': False, 'message': 'Internal server error'}), 500

    @blueprint.route('/visit', methods=['POST'])
    @rate_limited
    def track_visit():
        """Track a new visitor session."""
        payload = parse_payload(VisitPayload, request.get_json(silent=True))
        session_id = recorder.record_visit(
            session_id=payload.session_id,
            ip_address=get_client_ip(),
            user_agent=request.headers.get('User-Agent', ''),
            referrer=payload.referrer,
            utm_source=payload.utm_source,
            utm_medium=payload.utm_medium,
            utm_campaign=payload.utm_campaign,
        )
        return jsonify({'success': True, 'sessionId': session_id})

    @blueprint.route('/page-view', methods=['POST'])
    @rate_limited
    def track_page_view():
        """Track a page view."""
        payload = parse_payload(PageViewPayload, request.get_json(silent=True))
        recorder.record_page_view(payload.session_id, payload.page, payload.time_spent)
        return jsonify({'success': True})

    @blueprint.route('/action', methods=['POST'])
    @rate_limited
    def track_action():
        """Track a user action."""
        payload = parse_payload(ActionPayload, request.get_json(silent=True))
        recorder.record_action(payload.session_id, payload.type, payload.element, payload.data)
        return jsonify({'success': True})

    @blueprint.route('/dashboard', methods=['GET'])
    def dashboard():
        """Dashboard data for the last ``days`` days."""
        days = parse_days(request.args.get('days'), default_days)
        summary = aggregator.compute_dashboard(days)
        return jsonify({'success': True, 'data': summary.to_dict()})

    @blueprint.route('/stats', methods=['GET'])
    def quick_stats():
        """Headline counters."""
        stats = aggregator.compute_quick_stats()
        return jsonify({'success': True, 'data': stats.to_dict()})

    return blueprint
