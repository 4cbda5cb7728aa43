"""
User-agent classification.

Parses a raw User-Agent header into OS, browser (name + type) and device
(model + type) using ordered signature families. Families are checked in
a fixed priority order and the first matching signature wins:

    browser: crawlers, CLIs, email clients, fetchers, in-app browsers,
             media players, vehicle head units, standard browsers
    device:  extra devices (TVs, consoles, XR, wearables), standard devices
    os:      one table

A signature either carries a fixed name or takes it from the first regex
group. Anything unmatched stays None; parsing never raises.
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple

# Browser types
CRAWLER = "crawler"
FETCHER = "fetcher"
CLI = "cli"
EMAIL = "email"
INAPP = "inapp"
MEDIAPLAYER = "mediaplayer"
VEHICLE = "vehicle"

# Device types
MOBILE = "mobile"
TABLET = "tablet"
SMARTTV = "smarttv"
CONSOLE = "console"
WEARABLE = "wearable"
XR = "xr"


@dataclass(frozen=True)
class Signature:
    """One (pattern, name, type) entry of a signature family"""

    pattern: re.Pattern
    name: Optional[str] = None
    type: Optional[str] = None

    def match(self, user_agent: str) -> Optional[Tuple[Optional[str], Optional[str]]]:
        found = self.pattern.search(user_agent)
        if not found:
            return None
        name = self.name
        if name is None and found.groups():
            name = found.group(1).strip()
        return name, self.type


@dataclass(frozen=True)
class SignatureFamily:
    """Named, ordered group of signatures"""

    name: str
    signatures: Tuple[Signature, ...]

    def match(self, user_agent: str) -> Optional[Tuple[Optional[str], Optional[str]]]:
        for signature in self.signatures:
            result = signature.match(user_agent)
            if result is not None:
                return result
        return None


def _family(name: str, *entries) -> SignatureFamily:
    """Compile (regex, name, type) tuples into a family (case-insensitive)"""
    return SignatureFamily(
        name=name,
        signatures=tuple(
            Signature(re.compile(regex, re.IGNORECASE), sig_name, sig_type)
            for regex, sig_name, sig_type in entries
        ),
    )


CRAWLERS = _family(
    "crawlers",
    (r"\b(Googlebot(?:-Image|-Video|-News)?|Storebot-Google|Google-InspectionTool|GoogleOther)\b", None, CRAWLER),
    (r"\bAdsBot-Google(?:-Mobile)?\b", "AdsBot-Google", CRAWLER),
    (r"\b(bingbot|msnbot|BingPreview)\b", None, CRAWLER),
    (r"\b(DuckDuckBot|DuckAssistBot)\b", None, CRAWLER),
    (r"\b(Baiduspider)\b", None, CRAWLER),
    (r"\b(YandexBot|YandexImages|YandexMobileBot)\b", None, CRAWLER),
    (r"\b(Applebot(?:-Extended)?)\b", None, CRAWLER),
    (r"\b(GPTBot|OAI-SearchBot|ClaudeBot|Claude-SearchBot|anthropic-ai|PerplexityBot|CCBot|Bytespider|Amazonbot|Meta-ExternalAgent|cohere-ai|Diffbot)\b", None, CRAWLER),
    (r"\b(AhrefsBot|SemrushBot|MJ12bot|DotBot|rogerbot|BLEXBot|DataForSeoBot|SeznamBot|PetalBot|Qwantbot|Yeti|Exabot|MojeekBot)\b", None, CRAWLER),
    (r"\b(Sogou (?:web|inst) spider)", None, CRAWLER),
    (r"\b(ia_archiver|archive\.org_bot)\b", None, CRAWLER),
)

CLIS = _family(
    "clis",
    (r"^(curl)/", None, CLI),
    (r"^(Wget)/", None, CLI),
    (r"^(HTTPie)/", None, CLI),
    (r"^(aria2)/", None, CLI),
    (r"\b(WindowsPowerShell|PowerShell)/", "PowerShell", CLI),
    (r"^(Lynx)/", None, CLI),
    (r"^(w3m)/", None, CLI),
    (r"^(Links) \(", None, CLI),
    (r"^(ELinks)/", None, CLI),
)

EMAILS = _family(
    "emails",
    (r"\b(Thunderbird)/", None, EMAIL),
    (r"\bMicrosoft Outlook\b|\bMSOffice\b", "Microsoft Outlook", EMAIL),
    (r"\b(Airmail|Spark|Postbox|eM Client|Canary Mail)\b", None, EMAIL),
    (r"\bYahooMailProxy\b", "Yahoo Mail", EMAIL),
    (r"\bGoogleImageProxy\b", "Gmail Image Proxy", EMAIL),
    (r"\bAppleMail/|\bMail/\d+.*Darwin", "Apple Mail", EMAIL),
)

FETCHERS = _family(
    "fetchers",
    (r"\b(facebookexternalhit|facebookcatalog|meta-externalfetcher)\b", None, FETCHER),
    (r"\b(Twitterbot|LinkedInBot|Slackbot(?:-LinkExpanding)?|Slack-ImgProxy|Discordbot|TelegramBot|Pinterestbot|redditbot|Embedly|Iframely|vkShare|SkypeUriPreview|Mastodon|Bluesky Cardyb|Google-Read-Aloud|FeedFetcher-Google|Google-Site-Verification)\b", None, FETCHER),
    (r"\b(ChatGPT-User|Perplexity-User|Claude-User|MistralAI-User)\b", None, FETCHER),
    (r"\b(WhatsApp)/[\d.]+ [AiNW]\b", None, FETCHER),
    (r"\b(python-requests|python-httpx|python-urllib3|aiohttp|Python-urllib)\b", None, FETCHER),
    (r"\b(Go-http-client|okhttp|axios|node-fetch|undici|got|Deno|Bun|Java-http-client|Apache-HttpClient|libwww-perl|GuzzleHttp|PostmanRuntime|Dart|Ruby|Faraday|reqwest)\b/", None, FETCHER),
)

INAPPS = _family(
    "inapps",
    (r"\bFBAN/FBIOS|\bFB_IAB/|\bFBAV/", "Facebook", INAPP),
    (r"\b(Instagram) [\d.]+", None, INAPP),
    (r"\bMicroMessenger/", "WeChat", INAPP),
    (r"\b(Line)/[\d.]+", None, INAPP),
    (r"\bKAKAOTALK\b", "KakaoTalk", INAPP),
    (r"\bmusical_ly|\bBytedanceWebview\b|\bTikTok\b", "TikTok", INAPP),
    (r"\b(Snapchat)/", None, INAPP),
    (r"\bTwitter for (?:iPhone|iPad|Android)\b", "Twitter", INAPP),
    (r"\b(LinkedInApp)\b", "LinkedIn", INAPP),
    (r"\b(Pinterest) for (?:iOS|Android)\b", None, INAPP),
    (r"\b(Telegram)-Android/|\bTelegramWebview\b", "Telegram", INAPP),
    (r"\b(DingTalk|Weibo|QQ)/[\d.]+", None, INAPP),
)

MEDIA_PLAYERS = _family(
    "media_players",
    (r"\b(VLC)/", None, MEDIAPLAYER),
    (r"\bVLC media player\b", "VLC", MEDIAPLAYER),
    (r"\b(NSPlayer|Windows-Media-Player)/", "Windows Media Player", MEDIAPLAYER),
    (r"\b(iTunes)/", None, MEDIAPLAYER),
    (r"\b(AppleCoreMedia)/", None, MEDIAPLAYER),
    (r"\b(Winamp|foobar2000|AIMP|mpv|MPlayer|Kodi|Plex|Emby|Jellyfin|QuickTime|ExoPlayerLib|GStreamer|Lavf|stagefright)\b", None, MEDIAPLAYER),
)

VEHICLES = _family(
    "vehicles",
    (r"\bTesla\b|\bQtCarBrowser\b", "Tesla", VEHICLE),
    (r"\b(Rivian|Polestar|BYD)\b", None, VEHICLE),
    (r"\bAndroid Automotive\b|\bAAOS\b", "Android Automotive", VEHICLE),
)

BROWSERS = _family(
    "browsers",
    (r"\bEdg(?:e|A|iOS)?/", "Edge", None),
    (r"\bOPR/|\bOpera\b", "Opera", None),
    (r"\bSamsungBrowser/", "Samsung Internet", None),
    (r"\bYaBrowser/", "Yandex", None),
    (r"\bVivaldi/", "Vivaldi", None),
    (r"\bUC ?Browser/", "UCBrowser", None),
    (r"\bDuckDuckGo/", "DuckDuckGo", None),
    (r"\bFxiOS/|\bFirefox/[\d.]+.*\bMobile\b|\bMobile\b.*\bFirefox/", "Mobile Firefox", None),
    (r"\bFirefox/", "Firefox", None),
    (r"\bCriOS/|\bChrome/[\d.]+ Mobile\b", "Mobile Chrome", None),
    (r"\bChrom(?:e|ium)/", "Chrome", None),
    (r"\bVersion/[\d.]+.*\bMobile/.*\bSafari/", "Mobile Safari", None),
    (r"\bVersion/[\d.]+.*\bSafari/", "Safari", None),
    (r"\bMSIE\b|\bTrident/", "IE", None),
)

BROWSER_FAMILIES: Tuple[SignatureFamily, ...] = (
    CRAWLERS,
    CLIS,
    EMAILS,
    FETCHERS,
    INAPPS,
    MEDIA_PLAYERS,
    VEHICLES,
    BROWSERS,
)

EXTRA_DEVICES = _family(
    "extra_devices",
    (r"\bAppleTV\b|\bApple TV\b|\btvOS\b", "Apple TV", SMARTTV),
    (r"\bCrKey/", "Chromecast", SMARTTV),
    (r"\bAFT[A-Z]{1,4}\b", "Fire TV", SMARTTV),
    (r"\bRoku/", "Roku", SMARTTV),
    (r"\bBRAVIA\b", "Bravia", SMARTTV),
    (r"\b(?:SMART-TV|SmartTV|Tizen.*\bTV\b|Web0S|webOS.*TV|HbbTV)\b", "Smart TV", SMARTTV),
    (r"\b(PlayStation (?:5|4|3|Vita|Portable))\b", None, CONSOLE),
    (r"\b(Xbox(?: One| Series [XS])?)\b", None, CONSOLE),
    (r"\b(Nintendo (?:Switch|WiiU|Wii|3DS))\b", None, CONSOLE),
    (r"\bQuest( \d| Pro)?\b.*\bOculusBrowser/|\bOculusBrowser/", "Quest", XR),
    (r"\bVisionOS\b|\bApple Vision\b", "Vision Pro", XR),
    (r"\bWatch OS\b|\bwatchOS\b|\bWear OS\b|\bSM-R\d+", "Watch", WEARABLE),
    (r"\bKindle/|\bSilk/", "Kindle", TABLET),
)

DEVICES = _family(
    "devices",
    (r"\((iPad);", None, TABLET),
    (r"\((iPhone|iPod)(?: touch)?;", None, MOBILE),
    (r"\bAndroid [\d.]+;(?:[^;)]*;)*? ?([^;)]+?) Build/[^)]*\).*\bMobile\b", None, MOBILE),
    (r"\bAndroid [\d.]+;(?:[^;)]*;)*? ?([^;)]+?) Build/", None, TABLET),
    (r"\bAndroid [\d.]+; (?:wv; )?([^;)]+)\).*\bMobile\b", None, MOBILE),
    (r"\bAndroid [\d.]+; (?:wv; )?([^;)]+)\)", None, TABLET),
    (r"\bAndroid\b.*\bMobile\b", None, MOBILE),
    (r"\bAndroid\b", None, TABLET),
    (r"\((Macintosh);", None, None),
    (r"\bWindows Phone\b", None, MOBILE),
    (r"\bBlackBerry\b|\bBB10\b", "BlackBerry", MOBILE),
    (r"\bKaiOS/", None, MOBILE),
)

DEVICE_FAMILIES: Tuple[SignatureFamily, ...] = (EXTRA_DEVICES, DEVICES)

OPERATING_SYSTEMS = _family(
    "operating_systems",
    (r"\bWindows Phone\b", "Windows Phone", None),
    (r"\bWindows NT\b|\bWin(?:32|64)\b|\bWindows\b", "Windows", None),
    (r"\bHarmonyOS\b", "HarmonyOS", None),
    (r"\bCrOS\b", "Chrome OS", None),
    (r"\bKaiOS\b", "KaiOS", None),
    (r"\bTizen\b", "Tizen", None),
    (r"\bWeb0S\b|\bwebOS\b", "webOS", None),
    (r"\bAndroid\b", "Android", None),
    (r"\btvOS\b|\bAppleTV\b", "tvOS", None),
    (r"\bwatchOS\b", "watchOS", None),
    (r"\bVisionOS\b", "visionOS", None),
    (r"\biPhone OS\b|\b(?:iPhone|iPad|iPod)\b.*\bOS [\d_]+ like Mac OS X\b|\bCFNetwork/.*Darwin", "iOS", None),
    (r"\bMac OS X\b|\bMacintosh\b|\bDarwin\b", "macOS", None),
    (r"\bPlayStation\b", "PlayStation", None),
    (r"\bXbox\b", "Xbox", None),
    (r"\bNintendo\b", "Nintendo", None),
    (r"\b(Ubuntu|Fedora|Debian|Arch Linux|Mint|SUSE|Gentoo|CentOS)\b", None, None),
    (r"\b(FreeBSD|OpenBSD|NetBSD|SunOS)\b", None, None),
    (r"\bLinux\b|\bX11\b", "Linux", None),
)


@dataclass(frozen=True)
class UserAgentInfo:
    """Result of user-agent classification; every field may be None"""

    os: Optional[str] = None
    browser: Optional[str] = None
    browser_type: Optional[str] = None
    device: Optional[str] = None
    device_type: Optional[str] = None


def _first_match(families: Tuple[SignatureFamily, ...], user_agent: str) -> Tuple[Optional[str], Optional[str]]:
    for family in families:
        result = family.match(user_agent)
        if result is not None:
            return result
    return None, None


def parse_user_agent(user_agent: Optional[str]) -> UserAgentInfo:
    """
    Classify a raw User-Agent header.

    Examples:
        >>> info = parse_user_agent("Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)")
        >>> info.browser, info.browser_type
        ('Googlebot', 'crawler')

        >>> parse_user_agent("")
        UserAgentInfo(os=None, browser=None, browser_type=None, device=None, device_type=None)
    """
    if not user_agent:
        return UserAgentInfo()

    os_name, _ = OPERATING_SYSTEMS.match(user_agent) or (None, None)
    browser, browser_type = _first_match(BROWSER_FAMILIES, user_agent)
    device, device_type = _first_match(DEVICE_FAMILIES, user_agent)

    return UserAgentInfo(
        os=os_name,
        browser=browser,
        browser_type=browser_type,
        device=device,
        device_type=device_type,
    )
