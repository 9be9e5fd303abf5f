"""ClickBench-style web analytics synthesizer.

Simulates the ClickBench ``hits`` table: page views and events with
session, device, geography, timing and campaign columns.

Features:
- Bounded user pool so the same users recur across many hits
- Device type decides the screen resolution set, and click coordinates
  stay inside the chosen resolution
- Region and city are drawn together so they stay paired

The draw order below is part of the output contract; reordering any
sampler call changes every subsequent value.
"""

from __future__ import annotations

from benchstage.distributions.samplers import (
    below,
    chance,
    int_range,
    pick,
    unix_timestamp_range,
)
from benchstage.errors import GenerationInvariantViolation
from benchstage.generators.base import IdentifierPools, RecordSynthesizer
from benchstage.rng import Mulberry32
from benchstage.schemas.clickbench import Hit

CLICKBENCH_SEED = 56789

MAX_SAFE_INTEGER = 2**53 - 1
MAX_UINT32 = 4_294_967_295
MAX_INT32 = 2_147_483_647

MIN_USER_POOL = 100
HITS_PER_USER = 10

USER_AGENTS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 Chrome/91.0.4472.124",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 Safari/605.1.15",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:89.0) Gecko/20100101 Firefox/89.0",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 Chrome/91.0.4472.114",
    "Mozilla/5.0 (iPhone; CPU iPhone OS 14_6 like Mac OS X) AppleWebKit/605.1.15",
    "Mozilla/5.0 (iPad; CPU OS 14_6 like Mac OS X) AppleWebKit/605.1.15",
    "Mozilla/5.0 (Android 11; Mobile; rv:89.0) Gecko/89.0 Firefox/89.0",
)

REFERER_DOMAINS = (
    "google.com", "facebook.com", "twitter.com", "youtube.com", "reddit.com",
    "linkedin.com", "instagram.com", "pinterest.com", "bing.com", "yahoo.com",
    "tiktok.com", "amazon.com", "wikipedia.org", "baidu.com", "yandex.ru",
)

URL_PATHS = (
    "/", "/products", "/about", "/contact", "/blog", "/news", "/shop",
    "/category/electronics", "/category/clothing", "/category/home",
    "/product/123", "/product/456", "/product/789", "/cart", "/checkout",
    "/search", "/account", "/login", "/register", "/help", "/faq",
)

# Empty phrases are repeated on purpose: most hits carry no search term
SEARCH_PHRASES = (
    "best laptop 2024", "cheap flights", "weather today", "news headlines",
    "recipe chicken", "how to cook", "buy shoes online", "smartphone deals",
    "movie reviews", "sports scores", "stock market", "travel destinations",
    "", "", "", "",
)

COUNTRIES = ("US", "GB", "DE", "FR", "CA", "AU", "JP", "BR", "IN", "RU", "CN", "ES", "IT", "NL", "PL")
REGIONS = (
    "California", "Texas", "New York", "Florida", "Illinois",
    "London", "Bavaria", "Paris", "Ontario", "Victoria",
)
CITIES = (
    "Los Angeles", "Houston", "New York", "Miami", "Chicago",
    "London", "Munich", "Paris", "Toronto", "Melbourne",
)

OS_NAMES = ("Windows", "Mac OS X", "Linux", "iOS", "Android")
BROWSERS = ("Chrome", "Safari", "Firefox", "Edge", "Opera")
DEVICE_TYPES = ("desktop", "mobile", "tablet")

MOBILE_RESOLUTIONS = ((375, 812), (414, 896), (390, 844), (360, 800))
DESKTOP_RESOLUTIONS = ((1920, 1080), (1366, 768), (1536, 864), (1440, 900), (2560, 1440))

TRAFFIC_SOURCES = ("organic", "paid", "direct", "referral", "social", "email")
EVENT_TYPES = ("pageview", "click", "scroll", "form_submit", "add_to_cart", "purchase", "video_play")
HIT_COLORS = ("R", "G", "B", "W")
BROWSER_LANGUAGES = ("en", "en-US", "en-GB", "de", "fr", "es", "zh", "ja", "ru", "pt")
SOCIAL_NETWORKS = ("", "", "", "Facebook", "Twitter", "Instagram", "LinkedIn")
SOCIAL_ACTIONS = ("", "", "", "like", "share", "comment")
HTTP_ERRORS = (404, 500, 502, 503)
CURRENCIES = ("USD", "EUR", "GBP", "JPY", "CNY", "")
UTM_SOURCES = ("", "", "google", "facebook", "twitter", "newsletter")
UTM_MEDIUMS = ("", "", "cpc", "organic", "social", "email")
UTM_CAMPAIGNS = ("", "", "summer_sale", "black_friday", "new_product")

EVENT_START_YEAR = 2020
EVENT_END_YEAR = 2024
SECONDS_PER_DAY = 86_400
URL_DOMAIN = "example.com"


def user_pool_size(hit_count: int) -> int:
    """Number of distinct users for a run of ``hit_count`` hits."""
    return max(MIN_USER_POOL, hit_count // HITS_PER_USER)


def _flag(value: bool) -> int:
    return 1 if value else 0


class HitSynthesizer(RecordSynthesizer[Hit]):
    """Synthesizer for the ``hits`` table.

    Attributes:
        user_ids: The run's user pool, drawn in ``prepare``

    Example:
        >>> synth = HitSynthesizer()
        >>> rng = Mulberry32(CLICKBENCH_SEED)
        >>> hits = list(synth.generate_stream(2000, rng, IdentifierPools()))
        >>> len(synth.user_ids)
        200
    """

    table = "hits"
    record_type = Hit

    def __init__(self, *, reference_skew: float = 0.0) -> None:
        super().__init__(reference_skew=reference_skew)
        self.user_ids: tuple[int, ...] = ()

    def prepare(self, rng: Mulberry32, count: int, pools: IdentifierPools) -> None:
        """Draw the bounded user pool before any hit."""
        self.user_ids = tuple(below(MAX_INT32, rng) for _ in range(user_pool_size(count)))

    def identifier(self, record: Hit) -> int:
        return record.WatchID

    def synthesize(self, index: int, rng: Mulberry32, pools: IdentifierPools) -> Hit:
        if not self.user_ids:
            raise GenerationInvariantViolation("users", table=self.table, reason="empty")

        # Session mode first: every dependent field below derives from these
        user_id = pick(self.user_ids, rng)
        event_time = unix_timestamp_range(EVENT_START_YEAR, EVENT_END_YEAR, rng)
        is_new_user = chance(0.3, rng)
        country = pick(COUNTRIES, rng)
        region_idx = below(len(REGIONS), rng)
        device_type = pick(DEVICE_TYPES, rng)
        is_mobile = device_type in ("mobile", "tablet")

        session_duration = below(1800, rng)
        page_views = int_range(1, 20, rng)
        bounced = chance(0.4, rng)

        width, height = pick(MOBILE_RESOLUTIONS if is_mobile else DESKTOP_RESOLUTIONS, rng)
        client_x = below(width, rng)
        client_y = below(height, rng)

        # Column values, drawn in column order
        return Hit(
            WatchID=below(MAX_SAFE_INTEGER, rng),
            JavaEnable=_flag(rng.next() > 0.1),
            Title=f"Page Title {below(1000, rng)}",
            GoodEvent=_flag(rng.next() > 0.02),
            EventTime=event_time,
            EventDate=event_time // SECONDS_PER_DAY * SECONDS_PER_DAY,
            CounterID=below(10_000, rng),
            ClientIP=below(MAX_UINT32, rng),
            CounterClass=below(5, rng),
            OS=pick(OS_NAMES, rng),
            UserAgent=pick(USER_AGENTS, rng),
            URL=f"https://{URL_DOMAIN}{pick(URL_PATHS, rng)}",
            Referer=f"https://{pick(REFERER_DOMAINS, rng)}/" if rng.next() > 0.3 else "",
            URLDomain=URL_DOMAIN,
            RefererDomain=pick(REFERER_DOMAINS, rng) if rng.next() > 0.3 else "",
            IsRefresh=_flag(chance(0.05, rng)),
            IsLink=_flag(chance(0.3, rng)),
            IsDownload=_flag(chance(0.02, rng)),
            IsNotBounce=_flag(not bounced),
            FUniqID=below(MAX_SAFE_INTEGER, rng),
            HID=below(MAX_SAFE_INTEGER, rng),
            IsOldCounter=_flag(chance(0.1, rng)),
            IsEvent=_flag(pick(EVENT_TYPES, rng) != "pageview"),
            IsParameter=_flag(chance(0.2, rng)),
            DontCountHits=_flag(chance(0.01, rng)),
            WithHash=_flag(chance(0.1, rng)),
            HitColor=pick(HIT_COLORS, rng),
            UTCEventTime=event_time,
            Age=int_range(18, 97, rng),
            Sex=below(3, rng),
            Income=below(5, rng),
            Interests=below(1000, rng),
            Robotness=below(100, rng) if chance(0.02, rng) else 0,
            GeneralInterests=below(100, rng),
            RemoteIP=below(MAX_UINT32, rng),
            RemoteIP6="::ffff:" + ".".join(str(below(256, rng)) for _ in range(4)),
            WindowName=below(10, rng),
            OpenerName=below(10, rng),
            HistoryLength=below(20, rng),
            BrowserLanguage=pick(BROWSER_LANGUAGES, rng),
            BrowserCountry=country,
            SocialNetwork=pick(SOCIAL_NETWORKS, rng),
            SocialAction=pick(SOCIAL_ACTIONS, rng),
            HTTPError=pick(HTTP_ERRORS, rng) if chance(0.01, rng) else 0,
            SendTiming=below(1000, rng),
            DNSTiming=below(100, rng),
            ConnectTiming=below(200, rng),
            ResponseStartTiming=below(500, rng),
            ResponseEndTiming=below(2000, rng),
            FetchTiming=below(100, rng),
            RedirectTiming=below(500, rng) if chance(0.2, rng) else 0,
            DOMInteractiveTiming=below(3000, rng),
            DOMContentLoadedTiming=below(4000, rng),
            DOMCompleteTiming=below(5000, rng),
            LoadEventStartTiming=below(5500, rng),
            LoadEventEndTiming=below(6000, rng),
            NSToDOMContentLoadedTiming=below(4000, rng),
            FirstPaintTiming=below(2000, rng),
            RedirectCount=below(3, rng) if chance(0.1, rng) else 0,
            SocialSourceNetworkID=below(10, rng),
            SocialSourcePage="",
            ParamPrice=below(100_000, rng),
            ParamOrderID=str(below(1_000_000, rng)) if chance(0.1, rng) else "",
            ParamCurrency=pick(CURRENCIES, rng),
            ParamCurrencyID=below(10, rng),
            GoalsReached=below(10, rng),
            OpenstatServiceName="",
            OpenstatCampaignID="",
            OpenstatAdID="",
            OpenstatSourceID="",
            UTMSource=pick(UTM_SOURCES, rng),
            UTMMedium=pick(UTM_MEDIUMS, rng),
            UTMCampaign=pick(UTM_CAMPAIGNS, rng),
            UTMContent="",
            UTMTerm=pick(SEARCH_PHRASES, rng),
            FromTag="",
            HasGCLID=_flag(chance(0.1, rng)),
            RefererHash=below(MAX_SAFE_INTEGER, rng),
            URLHash=below(MAX_SAFE_INTEGER, rng),
            CLID=below(1_000_000, rng),
            YCLID=below(1_000_000, rng),
            ShareService="",
            ShareURL="",
            ShareTitle="",
            ParsedParamsKey1="",
            ParsedParamsKey2="",
            ParsedParamsKey3="",
            ParsedParamsKey4="",
            ParsedParamsKey5="",
            ParsedParamsValueDouble=0.0,
            IsLandmark=_flag(chance(0.05, rng)),
            RequestNum=below(100, rng),
            RequestTry=below(3, rng),
            UserID=user_id,
            SessionID=below(MAX_SAFE_INTEGER, rng),
            PageViews=page_views,
            SessionDuration=session_duration,
            TrafficSource=pick(TRAFFIC_SOURCES, rng),
            DeviceType=device_type,
            ScreenWidth=width,
            ScreenHeight=height,
            ClientX=client_x,
            ClientY=client_y,
            Country=country,
            Region=REGIONS[region_idx],
            City=CITIES[region_idx % len(CITIES)],
            Browser=pick(BROWSERS, rng),
            IsNewUser=_flag(is_new_user),
        )
