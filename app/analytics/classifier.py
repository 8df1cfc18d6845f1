"""
User Agent Classifier

Heuristic device, browser and OS detection from a user-agent string.
"""

import re
from typing import Dict, Optional, Tuple

from .models import DeviceType

# Tablet identifiers also match the generic mobile patterns, so they go first.
_TABLET_RE = re.compile(r"tablet|ipad|playbook|silk", re.IGNORECASE)
_MOBILE_RE = re.compile(
    r"mobile|iphone|ipod|android|blackberry|opera mini|windows ce|palm|smartphone|iemobile",
    re.IGNORECASE,
)
_DESKTOP_RE = re.compile(r"windows nt|macintosh|mac os x|x11|linux|cros", re.IGNORECASE)

# (label, markers, exclusions), first match wins
_BROWSERS: Tuple[Tuple[str, Tuple[str, ...], Tuple[str, ...]], ...] = (
    ("Chrome", ("chrome", "crios"), ("edg", "opr", "opera")),
    ("Firefox", ("firefox", "fxios"), ()),
    ("Safari", ("safari",), ("chrome", "chromium", "crios", "fxios", "edg", "opr")),
    ("Edge", ("edg",), ()),
    ("Opera", ("opera", "opr"), ()),
)

_OPERATING_SYSTEMS: Tuple[Tuple[str, Tuple[str, ...], Tuple[str, ...]], ...] = (
    ("Windows", ("windows",), ()),
    ("macOS", ("macintosh", "mac os x", "macos"), ("iphone", "ipad", "ipod")),
    ("Linux", ("linux", "x11"), ("android",)),
    ("Android", ("android",), ()),
    ("iOS", ("iphone", "ipad", "ipod", "ios"), ()),
)

UNKNOWN = "unknown"


def _first_match(ua: str, table) -> str:
    for label, markers, exclusions in table:
        if any(m in ua for m in markers) and not any(x in ua for x in exclusions):
            return label
    return UNKNOWN


def classify_device(user_agent: Optional[str]) -> DeviceType:
    """Classify a user agent as desktop, mobile, tablet or unknown."""
    if not user_agent or not user_agent.strip():
        return DeviceType.UNKNOWN
    if _TABLET_RE.search(user_agent):
        return DeviceType.TABLET
    if _MOBILE_RE.search(user_agent):
        return DeviceType.MOBILE
    if _DESKTOP_RE.search(user_agent):
        return DeviceType.DESKTOP
    return DeviceType.UNKNOWN


def classify_browser_os(user_agent: Optional[str]) -> Dict[str, str]:
    """Extract browser and OS labels.

    Args:
        user_agent: User agent string

    Returns:
        Dictionary with ``browser`` and ``os`` keys, ``"unknown"`` when nothing matches
    """
    if not user_agent:
        return {"browser": UNKNOWN, "os": UNKNOWN}

    ua = user_agent.lower()
    return {
        "browser": _first_match(ua, _BROWSERS),
        "os": _first_match(ua, _OPERATING_SYSTEMS),
    }
