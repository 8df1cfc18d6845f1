"""
Event Recorder

Turns visit, page-view and action events into session store writes and
derives the conversion flags.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from .classifier import classify_browser_os, classify_device
from .errors import SessionNotFound
from .models import Action, ActionType, PageView, Session
from .session_store import SessionStore
from .validation import (
    validate_action_data,
    validate_action_type,
    validate_element,
    validate_optional_text,
    validate_page,
    validate_session_id,
    validate_time_spent,
)

logger = logging.getLogger(__name__)

# (action type, element) -> session flag that latches to True
CONVERSION_RULES: Dict[tuple, str] = {
    (ActionType.FORM_SUBMIT, "hire-form"): "hired_me",
    (ActionType.FORM_SUBMIT, "contact-form"): "contacted_me",
    (ActionType.FORM_SUBMIT, "newsletter-form"): "subscribed_newsletter",
    (ActionType.DOWNLOAD, "cv-download"): "downloaded_cv",
}


def local_now() -> datetime:
    """Current time as a timezone-aware local datetime."""
    return datetime.now().astimezone()


def conversion_flag_for(action_type: ActionType, element: str) -> Optional[str]:
    """Name of the flag an action latches, or None."""
    return CONVERSION_RULES.get((action_type, element))


class EventRecorder:
    """Sole writer of session records after creation."""

    def __init__(self, store: SessionStore, clock: Optional[Callable[[], datetime]] = None):
        """Initialize the recorder.

        Args:
            store: Session store to write to
            clock: Callable returning the current time (defaults to local now)
        """
        self.store = store
        self.clock = clock or local_now

    def record_visit(
        self,
        session_id: str,
        ip_address: Optional[str],
        user_agent: Optional[str],
        referrer: Optional[str] = None,
        utm_source: Optional[str] = None,
        utm_medium: Optional[str] = None,
        utm_campaign: Optional[str] = None,
    ) -> str:
        """Create the session on its first visit; repeat visits are no-ops.

        Returns:
            The canonical session id
        """
        session_id = validate_session_id(session_id)
        referrer = validate_optional_text(referrer, "referrer")
        utm_source = validate_optional_text(utm_source, "utmSource")
        utm_medium = validate_optional_text(utm_medium, "utmMedium")
        utm_campaign = validate_optional_text(utm_campaign, "utmCampaign")

        if self.store.exists(session_id):
            return session_id

        user_agent = user_agent or ""
        browser_os = classify_browser_os(user_agent)
        now = self.clock()
        session = Session(
            session_id=session_id,
            ip_address=ip_address or "unknown",
            user_agent=user_agent,
            device=classify_device(user_agent).value,
            browser=browser_os["browser"],
            os=browser_os["os"],
            visit_date=now,
            last_activity=now,
            referrer=referrer,
            utm_source=utm_source,
            utm_medium=utm_medium,
            utm_campaign=utm_campaign,
        )
        self.store.create(session)
        return session_id

    def record_page_view(self, session_id: str, page: str, time_spent: Optional[float] = None) -> Session:
        """Append a page view and add its dwell time.

        Raises:
            SessionNotFound: if the session does not exist
        """
        session_id = validate_session_id(session_id)
        page = validate_page(page)
        time_spent = validate_time_spent(time_spent)
        now = self.clock()

        def apply(session: Session) -> None:
            session.page_views.append(PageView(page=page, timestamp=now, time_spent=time_spent))
            session.total_time_spent += time_spent
            session.last_activity = now

        return self.store.update(session_id, apply)

    def record_action(
        self,
        session_id: str,
        action_type: str,
        element: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> Session:
        """Append an action and latch any conversion flag it implies.

        Raises:
            SessionNotFound: if the session does not exist
        """
        session_id = validate_session_id(session_id)
        kind = validate_action_type(action_type)
        element = validate_element(element)
        data = validate_action_data(data)
        flag = conversion_flag_for(kind, element)
        now = self.clock()

        def apply(session: Session) -> None:
            session.actions.append(Action(type=kind.value, element=element, timestamp=now, data=data))
            if flag and not getattr(session, flag):
                setattr(session, flag, True)
                logger.info(f"Session {session_id} converted: {flag}")
            session.last_activity = now

        return self.store.update(session_id, apply)

    def link_submission(
        self,
        session_id: str,
        hire_request_id: Optional[str] = None,
        name: Optional[str] = None,
        email: Optional[str] = None,
        newsletter: bool = False,
    ) -> Session:
        """Tie an externally stored hire request back to its session.

        Raises:
            SessionNotFound: if the session does not exist
        """
        session_id = validate_session_id(session_id)
        hire_request_id = validate_optional_text(hire_request_id, "hireRequestId")
        name = validate_optional_text(name, "name")
        email = validate_optional_text(email, "email")
        now = self.clock()

        def apply(session: Session) -> None:
            if hire_request_id:
                session.hire_request_id = hire_request_id
            if name:
                session.contact_name = name
            if email:
                session.contact_email = email
            if newsletter is True:
                session.subscribed_newsletter = True
            session.last_activity = now

        try:
            return self.store.update(session_id, apply)
        except SessionNotFound:
            logger.warning(f"Cannot link submission {hire_request_id} to unknown session {session_id}")
            raise
