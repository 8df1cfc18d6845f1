"""
Analytics Client

Session-scoped tracker that reports visits, page views and actions to the
analytics endpoints. One instance is built per page load and handed to
whatever needs to emit events.
"""

import logging
import random
import string
import time
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)

# Dwell time shorter than this is not reported
MIN_TRACKED_SECONDS = 5

_BASE36 = string.digits + string.ascii_lowercase


def generate_session_id() -> str:
    """Build an id of the form ``session_<epoch ms>_<9 base36 chars>``."""
    suffix = "".join(random.choice(_BASE36) for _ in range(9))
    return f"session_{int(time.time() * 1000)}_{suffix}"


class AnalyticsClient:
    """Tracker bound to a single browsing session."""

    def __init__(
        self,
        base_url: str,
        session_id: Optional[str] = None,
        http: Optional[requests.Session] = None,
        timeout: float = 5.0,
    ):
        """Initialize the client.

        Args:
            base_url: Site origin serving ``/api/analytics`` and ``/api/health``
            session_id: Existing session id, generated when omitted
            http: requests session to send through
            timeout: Per-request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.api_url = f"{self.base_url}/api/analytics"
        self.session_id = session_id or generate_session_id()
        self.http = http or requests.Session()
        self.timeout = timeout
        self.enabled = True
        self.current_page: Optional[str] = None
        self.page_started_at: Optional[float] = None

    def check_available(self) -> bool:
        """Probe the health endpoint and enable tracking only if it answers."""
        try:
            resp = self.http.get(f"{self.base_url}/api/health", timeout=self.timeout)
            self.enabled = resp.ok
        except requests.RequestException as exc:
            logger.info(f"Analytics disabled, API not available at {self.base_url}: {exc}")
            self.enabled = False
        return self.enabled

    def _post(self, path: str, payload: Dict[str, Any]) -> bool:
        if not self.enabled:
            return False
        try:
            resp = self.http.post(f"{self.api_url}{path}", json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning(f"Analytics tracking error on {path}: {exc}")
            return False
        if not resp.ok:
            logger.warning(f"Analytics {path} rejected with {resp.status_code}")
            return False
        return True

    def track_visit(
        self,
        referrer: Optional[str] = None,
        utm_source: Optional[str] = None,
        utm_medium: Optional[str] = None,
        utm_campaign: Optional[str] = None,
    ) -> bool:
        return self._post("/visit", {
            "sessionId": self.session_id,
            "referrer": referrer,
            "utmSource": utm_source,
            "utmMedium": utm_medium,
            "utmCampaign": utm_campaign,
        })

    def track_page_view(self, page: str, time_spent: Optional[float] = None) -> bool:
        payload: Dict[str, Any] = {"sessionId": self.session_id, "page": page}
        if time_spent is not None:
            payload["timeSpent"] = time_spent
        return self._post("/page-view", payload)

    def track_action(self, action_type: str, element: str, data: Optional[Dict[str, Any]] = None) -> bool:
        return self._post("/action", {
            "sessionId": self.session_id,
            "type": action_type,
            "element": element,
            "data": data or {},
        })

    def start_page(self, page: str) -> bool:
        """Mark ``page`` as current and report the view."""
        self.current_page = page
        self.page_started_at = time.monotonic()
        return self.track_page_view(page)

    def track_time_spent(self) -> bool:
        """Report dwell time on the current page if it exceeds the minimum."""
        if self.current_page is None or self.page_started_at is None:
            return False
        elapsed = int(time.monotonic() - self.page_started_at)
        if elapsed <= MIN_TRACKED_SECONDS:
            return False
        self.page_started_at = time.monotonic()
        return self.track_page_view(self.current_page, elapsed)
