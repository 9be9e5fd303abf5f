"""ClickBench-style web analytics record.

The ``Hit`` model mirrors the column set of the public ClickBench ``hits``
table plus a handful of session columns (device, screen, traffic source).
Field order is the serialization order.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from benchstage.schemas.types import Number

DeviceType = Literal["desktop", "mobile", "tablet"]
Flag = Literal[0, 1]


class Hit(BaseModel):
    """One web analytics event.

    Attributes worth noting:
        EventTime: Unix seconds; EventDate is the same instant truncated to the day.
        UserID: Drawn from a bounded per-run pool so users recur across hits.
        ScreenWidth/ScreenHeight: Chosen from a resolution set matching DeviceType.
        ClientX/ClientY: Always inside the screen resolution.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    WatchID: int = Field(..., ge=0)
    JavaEnable: Flag
    Title: str
    GoodEvent: Flag
    EventTime: int = Field(..., ge=0, description="Unix seconds")
    EventDate: int = Field(..., ge=0, description="Unix seconds at 00:00 UTC")
    CounterID: int
    ClientIP: int
    CounterClass: int
    OS: str
    UserAgent: str
    URL: str
    Referer: str
    URLDomain: str
    RefererDomain: str
    IsRefresh: Flag
    IsLink: Flag
    IsDownload: Flag
    IsNotBounce: Flag
    FUniqID: int
    HID: int
    IsOldCounter: Flag
    IsEvent: Flag
    IsParameter: Flag
    DontCountHits: Flag
    WithHash: Flag
    HitColor: str
    UTCEventTime: int
    Age: int = Field(..., ge=18, le=97)
    Sex: int = Field(..., ge=0, le=2, description="0=unknown, 1=male, 2=female")
    Income: int
    Interests: int
    Robotness: int
    GeneralInterests: int
    RemoteIP: int
    RemoteIP6: str
    WindowName: int
    OpenerName: int
    HistoryLength: int
    BrowserLanguage: str
    BrowserCountry: str
    SocialNetwork: str
    SocialAction: str
    HTTPError: int
    SendTiming: int
    DNSTiming: int
    ConnectTiming: int
    ResponseStartTiming: int
    ResponseEndTiming: int
    FetchTiming: int
    RedirectTiming: int
    DOMInteractiveTiming: int
    DOMContentLoadedTiming: int
    DOMCompleteTiming: int
    LoadEventStartTiming: int
    LoadEventEndTiming: int
    NSToDOMContentLoadedTiming: int
    FirstPaintTiming: int
    RedirectCount: int
    SocialSourceNetworkID: int
    SocialSourcePage: str
    ParamPrice: int
    ParamOrderID: str
    ParamCurrency: str
    ParamCurrencyID: int
    GoalsReached: int
    OpenstatServiceName: str
    OpenstatCampaignID: str
    OpenstatAdID: str
    OpenstatSourceID: str
    UTMSource: str
    UTMMedium: str
    UTMCampaign: str
    UTMContent: str
    UTMTerm: str
    FromTag: str
    HasGCLID: Flag
    RefererHash: int
    URLHash: int
    CLID: int
    YCLID: int
    ShareService: str
    ShareURL: str
    ShareTitle: str
    ParsedParamsKey1: str
    ParsedParamsKey2: str
    ParsedParamsKey3: str
    ParsedParamsKey4: str
    ParsedParamsKey5: str
    ParsedParamsValueDouble: Number
    IsLandmark: Flag
    RequestNum: int
    RequestTry: int
    UserID: int = Field(..., ge=0, description="Member of the run's user pool")
    SessionID: int
    PageViews: int = Field(..., ge=1, le=20)
    SessionDuration: int = Field(..., ge=0, lt=1800, description="Seconds")
    TrafficSource: str
    DeviceType: DeviceType
    ScreenWidth: int = Field(..., gt=0)
    ScreenHeight: int = Field(..., gt=0)
    ClientX: int = Field(..., ge=0)
    ClientY: int = Field(..., ge=0)
    Country: str = Field(..., min_length=2, max_length=2)
    Region: str
    City: str
    Browser: str
    IsNewUser: Flag
