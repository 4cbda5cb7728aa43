"""
Tests for user-agent classification.
"""
from shortlink_app.telemetry.useragent import (
    CLI,
    CONSOLE,
    CRAWLER,
    EMAIL,
    FETCHER,
    INAPP,
    MEDIAPLAYER,
    MOBILE,
    SMARTTV,
    VEHICLE,
    WEARABLE,
    XR,
    UserAgentInfo,
    parse_user_agent,
)

GOOGLEBOT = "Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)"
CHROME_WINDOWS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
SAFARI_IPHONE = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
)
CHROME_PIXEL = (
    "Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Mobile Safari/537.36"
)
INSTAGRAM_ANDROID = (
    "Mozilla/5.0 (Linux; Android 14; Pixel 8 Build/UQ1A.240105.004; wv) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Version/4.0 Chrome/120.0.6099.230 Mobile Safari/537.36 "
    "Instagram 313.0.0.26.328 Android (34/14; 420dpi; 1080x2400; Google/google; Pixel 8; shiba; shiba; en_US; 556277341)"
)
TESLA = (
    "Mozilla/5.0 (X11; GNU/Linux) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chromium/108.0.5359.215 Chrome/108.0.5359.215 Safari/537.36 Tesla/2023.44.30.8"
)


class TestBrowserFamilies:
    """Test family priority and first-match-wins"""

    def test_crawler(self):
        info = parse_user_agent(GOOGLEBOT)

        assert info.browser == "Googlebot"
        assert info.browser_type == CRAWLER

    def test_cli(self):
        info = parse_user_agent("curl/8.4.0")

        assert info.browser == "curl"
        assert info.browser_type == CLI
        assert info.os is None

    def test_fetcher(self):
        info = parse_user_agent("python-requests/2.31.0")

        assert info.browser == "python-requests"
        assert info.browser_type == FETCHER

    def test_link_preview_fetcher(self):
        """Test that unfurlers are fetchers, not crawlers"""
        info = parse_user_agent("Slackbot-LinkExpanding 1.0 (+https://api.slack.com/robots)")

        assert info.browser == "Slackbot-LinkExpanding"
        assert info.browser_type == FETCHER

    def test_standard_browser_has_no_type(self):
        info = parse_user_agent(CHROME_WINDOWS)

        assert info.browser == "Chrome"
        assert info.browser_type is None


class TestSpecialistFamilies:
    """Test the non-browser families and their priority over standard browsers"""

    def test_email_client(self):
        info = parse_user_agent("Microsoft Office/16.0 (Windows NT 10.0; Microsoft Outlook 16.0.17029; Pro)")

        assert info.browser == "Microsoft Outlook"
        assert info.browser_type == EMAIL
        assert info.os == "Windows"

    def test_email_client_over_gecko(self):
        info = parse_user_agent("Mozilla/5.0 (X11; Linux x86_64; rv:115.0) Gecko/20100101 Thunderbird/115.5.0")

        assert info.browser == "Thunderbird"
        assert info.browser_type == EMAIL

    def test_inapp_over_mobile_chrome(self):
        """Test that the in-app family wins over the webview's Chrome token"""
        info = parse_user_agent(INSTAGRAM_ANDROID)

        assert info.browser == "Instagram"
        assert info.browser_type == INAPP
        assert info.device == "Pixel 8"
        assert info.device_type == MOBILE

    def test_media_player(self):
        info = parse_user_agent("VLC/3.0.20 LibVLC/3.0.20")

        assert info.browser == "VLC"
        assert info.browser_type == MEDIAPLAYER

    def test_vehicle_over_chrome(self):
        info = parse_user_agent(TESLA)

        assert info.browser == "Tesla"
        assert info.browser_type == VEHICLE
        assert info.os == "Linux"


class TestExtraDevices:
    """Test TVs, consoles, XR and wearables ahead of the standard device table"""

    def test_console(self):
        info = parse_user_agent(
            "Mozilla/5.0 (PlayStation; PlayStation 5/2.26) AppleWebKit/605.1.15 "
            "(KHTML, like Gecko) Version/13.0 Safari/605.1.15"
        )

        assert info.device == "PlayStation 5"
        assert info.device_type == CONSOLE
        assert info.os == "PlayStation"

    def test_smart_tv(self):
        info = parse_user_agent(
            "Mozilla/5.0 (X11; Linux armv7l) AppleWebKit/537.36 (KHTML, like Gecko) "
            "Chrome/120.0.0.0 Safari/537.36 CrKey/1.56.500000"
        )

        assert info.device == "Chromecast"
        assert info.device_type == SMARTTV

    def test_xr_headset(self):
        info = parse_user_agent(
            "Mozilla/5.0 (X11; Linux x86_64; Quest 3) AppleWebKit/537.36 (KHTML, like Gecko) "
            "OculusBrowser/31.0.0.8.52 Chrome/120.0.6099.193 VR Safari/537.36"
        )

        assert info.device == "Quest"
        assert info.device_type == XR

    def test_wearable_over_android_phone(self):
        """Test that a watch is not classified by the generic Android rules"""
        info = parse_user_agent(
            "Mozilla/5.0 (Linux; Android 11; SM-R890) AppleWebKit/537.36 (KHTML, like Gecko) "
            "SamsungBrowser/2.0 Chrome/87.0.4280.141 Mobile Safari/537.36"
        )

        assert info.device == "Watch"
        assert info.device_type == WEARABLE
        assert info.browser == "Samsung Internet"


class TestPlatform:
    """Test OS and device detection"""

    def test_desktop(self):
        info = parse_user_agent(CHROME_WINDOWS)

        assert info.os == "Windows"
        assert info.device is None
        assert info.device_type is None

    def test_iphone(self):
        info = parse_user_agent(SAFARI_IPHONE)

        assert info == UserAgentInfo(
            os="iOS",
            browser="Mobile Safari",
            browser_type=None,
            device="iPhone",
            device_type=MOBILE,
        )

    def test_android_model_from_group(self):
        """Test that the device name comes from the first regex group"""
        info = parse_user_agent(CHROME_PIXEL)

        assert info.os == "Android"
        assert info.browser == "Mobile Chrome"
        assert info.device == "Pixel 8"
        assert info.device_type == MOBILE


class TestUnmatched:
    """Test that parsing degrades to None instead of raising"""

    def test_empty(self):
        assert parse_user_agent("") == UserAgentInfo()
        assert parse_user_agent(None) == UserAgentInfo()

    def test_unknown_agent(self):
        assert parse_user_agent("xyzzy") == UserAgentInfo()
