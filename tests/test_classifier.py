"""
Tests for user agent classification.
"""

import pytest

from app.analytics.classifier import classify_browser_os, classify_device
from app.analytics.models import DeviceType

CHROME_WINDOWS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
EDGE_WINDOWS = CHROME_WINDOWS + " Edg/120.0.0.0"
OPERA_WINDOWS = CHROME_WINDOWS + " OPR/105.0.0.0"
SAFARI_MAC = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.1 Safari/605.1.15"
)
FIREFOX_LINUX = "Mozilla/5.0 (X11; Ubuntu; Linux x86_64; rv:121.0) Gecko/20100101 Firefox/121.0"
CHROME_ANDROID = (
    "Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Mobile Safari/537.36"
)
SAFARI_IPHONE = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_1 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.1 Mobile/15E148 Safari/604.1"
)
SAFARI_IPAD = (
    "Mozilla/5.0 (iPad; CPU OS 17_1 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.1 Mobile/15E148 Safari/604.1"
)
KINDLE_SILK = (
    "Mozilla/5.0 (Linux; Android 9; KFTRWI) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Silk/120.2.1 like Chrome/120.0.0.0 Safari/537.36"
)


class TestClassifyDevice:
    """Device class detection."""

    def test_ipad_is_tablet_not_mobile(self):
        """The iPad UA also contains 'Mobile', tablet must still win."""
        assert "Mobile" in SAFARI_IPAD
        assert classify_device(SAFARI_IPAD) == DeviceType.TABLET

    def test_silk_is_tablet(self):
        assert classify_device(KINDLE_SILK) == DeviceType.TABLET

    @pytest.mark.parametrize("ua", [CHROME_ANDROID, SAFARI_IPHONE])
    def test_phones_are_mobile(self, ua):
        assert classify_device(ua) == DeviceType.MOBILE

    @pytest.mark.parametrize("ua", [CHROME_WINDOWS, SAFARI_MAC, FIREFOX_LINUX, EDGE_WINDOWS])
    def test_desktops(self, ua):
        assert classify_device(ua) == DeviceType.DESKTOP

    def test_case_insensitive(self):
        assert classify_device("SOMETHING IPAD SOMETHING") == DeviceType.TABLET
        assert classify_device("some iphone thing") == DeviceType.MOBILE

    @pytest.mark.parametrize("ua", ["", "   ", None, "curl/8.4.0", "python-requests/2.31"])
    def test_unrecognized_is_unknown(self, ua):
        assert classify_device(ua) == DeviceType.UNKNOWN


class TestClassifyBrowserOS:
    """Browser and OS label detection."""

    @pytest.mark.parametrize("ua,browser,os_name", [
        (CHROME_WINDOWS, "Chrome", "Windows"),
        (EDGE_WINDOWS, "Edge", "Windows"),
        (OPERA_WINDOWS, "Opera", "Windows"),
        (SAFARI_MAC, "Safari", "macOS"),
        (FIREFOX_LINUX, "Firefox", "Linux"),
        (CHROME_ANDROID, "Chrome", "Android"),
        (SAFARI_IPHONE, "Safari", "iOS"),
        (SAFARI_IPAD, "Safari", "iOS"),
    ])
    def test_known_agents(self, ua, browser, os_name):
        assert classify_browser_os(ua) == {"browser": browser, "os": os_name}

    @pytest.mark.parametrize("ua", ["", None, "curl/8.4.0"])
    def test_unknown_agents(self, ua):
        assert classify_browser_os(ua) == {"browser": "unknown", "os": "unknown"}

    def test_deterministic(self):
        assert classify_browser_os(SAFARI_MAC) == classify_browser_os(SAFARI_MAC)
