"""
Data Models for Analytics

Defines the session record, its page-view and action entries, and the
summaries produced by the aggregation engine.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from enum import Enum
from typing import Any, Dict, List, Optional


class DeviceType(Enum):
    """Device classes derived from the user agent."""

    DESKTOP = "desktop"
    MOBILE = "mobile"
    TABLET = "tablet"
    UNKNOWN = "unknown"


class ActionType(Enum):
    """Allowed action types for tracking."""

    CLICK = "click"
    SCROLL = "scroll"
    FORM_VIEW = "form_view"
    FORM_SUBMIT = "form_submit"
    DOWNLOAD = "download"
    EXTERNAL_LINK = "external_link"

    @classmethod
    def is_valid(cls, action_type: str) -> bool:
        """Check if an action type string is valid."""
        try:
            cls(action_type)
            return True
        except ValueError:
            return False

    @classmethod
    def get_allowed_types(cls) -> set[str]:
        """Get all allowed action type strings."""
        return {a.value for a in cls}


def _parse_ts(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


@dataclass
class PageView:
    """A single page view within a session."""

    page: str
    timestamp: datetime
    time_spent: float = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "page": self.page,
            "timestamp": self.timestamp.isoformat(),
            "time_spent": self.time_spent,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PageView":
        return cls(
            page=data.get("page", ""),
            timestamp=_parse_ts(data["timestamp"]),
            time_spent=data.get("time_spent", 0),
        )


@dataclass
class Action:
    """A single user action within a session."""

    type: str
    element: str
    timestamp: datetime
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "element": self.element,
            "timestamp": self.timestamp.isoformat(),
            "data": self.data,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Action":
        return cls(
            type=data.get("type", ""),
            element=data.get("element", ""),
            timestamp=_parse_ts(data["timestamp"]),
            data=data.get("data") or {},
        )


@dataclass
class Session:
    """One visitor's tracked browsing episode."""

    session_id: str
    ip_address: str
    user_agent: str
    visit_date: datetime
    last_activity: datetime
    device: str = DeviceType.UNKNOWN.value
    browser: str = "unknown"
    os: str = "unknown"
    page_views: List[PageView] = field(default_factory=list)
    total_time_spent: float = 0
    actions: List[Action] = field(default_factory=list)

    # Conversion latches
    hired_me: bool = False
    subscribed_newsletter: bool = False
    downloaded_cv: bool = False
    contacted_me: bool = False

    referrer: Optional[str] = None
    utm_source: Optional[str] = None
    utm_medium: Optional[str] = None
    utm_campaign: Optional[str] = None

    is_active: bool = True

    # Set when an external hire-request submission is tied to this session
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    hire_request_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "session_id": self.session_id,
            "ip_address": self.ip_address,
            "user_agent": self.user_agent,
            "device": self.device,
            "browser": self.browser,
            "os": self.os,
            "visit_date": self.visit_date.isoformat(),
            "page_views": [pv.to_dict() for pv in self.page_views],
            "total_time_spent": self.total_time_spent,
            "actions": [a.to_dict() for a in self.actions],
            "hired_me": self.hired_me,
            "subscribed_newsletter": self.subscribed_newsletter,
            "downloaded_cv": self.downloaded_cv,
            "contacted_me": self.contacted_me,
            "referrer": self.referrer,
            "utm_source": self.utm_source,
            "utm_medium": self.utm_medium,
            "utm_campaign": self.utm_campaign,
            "is_active": self.is_active,
            "last_activity": self.last_activity.isoformat(),
            "contact_name": self.contact_name,
            "contact_email": self.contact_email,
            "hire_request_id": self.hire_request_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Session":
        """Create Session from dictionary."""
        visit_date = _parse_ts(data["visit_date"])
        return cls(
            session_id=data["session_id"],
            ip_address=data.get("ip_address", "unknown"),
            user_agent=data.get("user_agent", ""),
            device=data.get("device", DeviceType.UNKNOWN.value),
            browser=data.get("browser", "unknown"),
            os=data.get("os", "unknown"),
            visit_date=visit_date,
            page_views=[PageView.from_dict(pv) for pv in data.get("page_views", [])],
            total_time_spent=data.get("total_time_spent", 0),
            actions=[Action.from_dict(a) for a in data.get("actions", [])],
            hired_me=bool(data.get("hired_me", False)),
            subscribed_newsletter=bool(data.get("subscribed_newsletter", False)),
            downloaded_cv=bool(data.get("downloaded_cv", False)),
            contacted_me=bool(data.get("contacted_me", False)),
            referrer=data.get("referrer"),
            utm_source=data.get("utm_source"),
            utm_medium=data.get("utm_medium"),
            utm_campaign=data.get("utm_campaign"),
            is_active=bool(data.get("is_active", True)),
            last_activity=_parse_ts(data.get("last_activity") or visit_date),
            contact_name=data.get("contact_name"),
            contact_email=data.get("contact_email"),
            hire_request_id=data.get("hire_request_id"),
        )


@dataclass
class DailySummary:
    """Materialized rollup of one calendar date."""

    date: date
    total_visitors: int = 0
    unique_visitors: int = 0
    total_page_views: int = 0
    average_time_spent: float = 0
    hire_requests: int = 0
    newsletter_subscriptions: int = 0
    contact_messages: int = 0
    cv_downloads: int = 0
    top_pages: List[Dict[str, Any]] = field(default_factory=list)
    top_referrers: List[Dict[str, Any]] = field(default_factory=list)
    device_breakdown: Dict[str, int] = field(
        default_factory=lambda: {d.value: 0 for d in DeviceType}
    )
    generated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "total_visitors": self.total_visitors,
            "unique_visitors": self.unique_visitors,
            "total_page_views": self.total_page_views,
            "average_time_spent": self.average_time_spent,
            "hire_requests": self.hire_requests,
            "newsletter_subscriptions": self.newsletter_subscriptions,
            "contact_messages": self.contact_messages,
            "cv_downloads": self.cv_downloads,
            "top_pages": self.top_pages,
            "top_referrers": self.top_referrers,
            "device_breakdown": self.device_breakdown,
            "generated_at": self.generated_at.isoformat() if self.generated_at else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DailySummary":
        generated_at = data.get("generated_at")
        return cls(
            date=date.fromisoformat(data["date"]),
            total_visitors=data.get("total_visitors", 0),
            unique_visitors=data.get("unique_visitors", 0),
            total_page_views=data.get("total_page_views", 0),
            average_time_spent=data.get("average_time_spent", 0),
            hire_requests=data.get("hire_requests", 0),
            newsletter_subscriptions=data.get("newsletter_subscriptions", 0),
            contact_messages=data.get("contact_messages", 0),
            cv_downloads=data.get("cv_downloads", 0),
            top_pages=data.get("top_pages", []),
            top_referrers=data.get("top_referrers", []),
            device_breakdown=data.get("device_breakdown", {}),
            generated_at=_parse_ts(generated_at) if generated_at else None,
        )


@dataclass
class DashboardSummary:
    """Time-windowed dashboard data."""

    window_days: int
    total_visitors: int = 0
    unique_visitors: int = 0
    hire_requests: int = 0
    newsletter_subscriptions: int = 0
    contact_messages: int = 0
    cv_downloads: int = 0
    conversion_rate: float = 0
    device_breakdown: List[Dict[str, Any]] = field(default_factory=list)
    top_pages: List[Dict[str, Any]] = field(default_factory=list)
    daily_visitors: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON shape served by the dashboard endpoint."""
        return {
            "summary": {
                "totalVisitors": self.total_visitors,
                "uniqueVisitors": self.unique_visitors,
                "hireRequests": self.hire_requests,
                "newsletterSubscriptions": self.newsletter_subscriptions,
                "contactMessages": self.contact_messages,
                "cvDownloads": self.cv_downloads,
                "conversionRate": self.conversion_rate,
            },
            "deviceBreakdown": self.device_breakdown,
            "topPages": self.top_pages,
            "dailyVisitors": self.daily_visitors,
        }


@dataclass
class QuickStats:
    """Headline counters for the admin dashboard."""

    today_visitors: int = 0
    total_visitors: int = 0
    total_hires: int = 0
    total_newsletter_subscriptions: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "todayVisitors": self.today_visitors,
            "totalVisitors": self.total_visitors,
            "totalHires": self.total_hires,
            "totalNewsletterSubscriptions": self.total_newsletter_subscriptions,
        }
