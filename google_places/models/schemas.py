import logging
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

logger = logging.getLogger(__name__)

# 成功扱いのステータス
SUCCESS_STATUSES = frozenset({"OK", "ZERO_RESULTS"})


def _as_string_set(value: Any) -> FrozenSet[str]:
    """文字列1つでも複数でも frozenset[str] にそろえる"""
    if value is None:
        return frozenset()
    if isinstance(value, str):
        return frozenset([value])
    return frozenset(str(v) for v in value)


class Endpoint(str, Enum):
    NEARBY_SEARCH = "nearbysearch"
    TEXT_SEARCH = "textsearch"
    DETAILS = "details"
    AUTOCOMPLETE = "autocomplete"

    @property
    def path(self) -> str:
        return f"/{self.value}/json"

    @property
    def results_key(self) -> str:
        """レスポンスJSONで結果が入っているキー"""
        if self is Endpoint.DETAILS:
            return "result"
        if self is Endpoint.AUTOCOMPLETE:
            return "predictions"
        return "results"


class RetryConfig(BaseModel):
    """ステータスによるリトライ設定 (デフォルトはリトライなし)"""
    model_config = ConfigDict(frozen=True)

    statuses: FrozenSet[str] = frozenset()
    max_retries: int = Field(default=0, ge=0)
    delay: float = Field(default=5.0, ge=0)

    @field_validator("statuses", mode="before")
    @classmethod
    def _normalize_statuses(cls, value: Any) -> FrozenSet[str]:
        return _as_string_set(value)


class SearchRequest(BaseModel):
    """1回の検索呼び出し分のオプション"""
    model_config = ConfigDict(frozen=True, extra="forbid")

    endpoint: Endpoint
    lat: Optional[float] = None
    lng: Optional[float] = None
    radius: Optional[int] = Field(default=None, gt=0)
    rankby: Optional[Literal["prominence", "distance"]] = None
    # textsearch では query、autocomplete では input として送る
    query: Optional[str] = None
    reference: Optional[str] = None
    types: Optional[Union[str, Tuple[str, ...]]] = None
    name: Optional[str] = None
    keyword: Optional[str] = None
    language: Optional[str] = None
    sensor: bool = False
    exclude: FrozenSet[str] = frozenset()
    retry: RetryConfig = Field(default_factory=RetryConfig)

    @field_validator("exclude", mode="before")
    @classmethod
    def _normalize_exclude(cls, value: Any) -> FrozenSet[str]:
        return _as_string_set(value)

    @model_validator(mode="before")
    @classmethod
    def _drop_radius_for_distance_ranking(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("rankby") == "distance" and data.get("radius") is not None:
            logger.warning("radius=%s ignored because rankby=distance", data["radius"])
            data = {**data, "radius": None}
        return data

    @model_validator(mode="after")
    def _check_location(self) -> "SearchRequest":
        if (self.lat is None) != (self.lng is None):
            raise ValueError("lat and lng must be given together")
        return self

    @property
    def location(self) -> Optional[Tuple[float, float]]:
        if self.lat is None:
            return None
        return (self.lat, self.lng)


class PageResponse(BaseModel):
    """1ページ分のAPIレスポンス"""
    model_config = ConfigDict(frozen=True)

    status: str
    results: List[Dict[str, Any]] = Field(default_factory=list)
    next_page_token: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status in SUCCESS_STATUSES

    @classmethod
    def from_json(cls, body: Dict[str, Any], endpoint: Endpoint) -> "PageResponse":
        raw = body.get(endpoint.results_key)
        if raw is None:
            results = []
        elif isinstance(raw, dict):
            # details は単一オブジェクト
            results = [raw]
        elif isinstance(raw, list):
            results = [r for r in raw if isinstance(r, dict)]
            if len(results) != len(raw):
                logger.warning(f"Dropped {len(raw) - len(results)} non-object entries from '{endpoint.results_key}'")
        else:
            logger.warning(f"Ignoring malformed '{endpoint.results_key}' of type {type(raw).__name__}")
            results = []

        status = body.get("status")
        token = body.get("next_page_token")
        message = body.get("error_message")
        return cls(
            status=status if isinstance(status, str) else "",
            results=results,
            next_page_token=token if isinstance(token, str) and token else None,
            error_message=message if isinstance(message, str) else None,
        )


class Review(BaseModel):
    model_config = ConfigDict(frozen=True)

    rating: Optional[float] = None
    type: Optional[str] = None
    author_name: Optional[str] = None
    author_url: Optional[str] = None
    text: Optional[str] = None
    time: int = 0


class Spot(BaseModel):
    model_config = ConfigDict(frozen=True)

    reference: Optional[str] = None
    place_id: Optional[str] = None
    vicinity: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    name: Optional[str] = None
    icon: Optional[str] = None
    types: List[str] = Field(default_factory=list)
    id: Optional[str] = None
    formatted_phone_number: Optional[str] = None
    international_phone_number: Optional[str] = None
    formatted_address: Optional[str] = None
    address_components: Optional[List[Dict[str, Any]]] = None
    street_number: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    rating: Optional[float] = None
    url: Optional[str] = None
    cid: int = 0
    website: Optional[str] = None
    reviews: List[Review] = Field(default_factory=list)


class Prediction(BaseModel):
    model_config = ConfigDict(frozen=True)

    description: Optional[str] = None
    id: Optional[str] = None
    reference: Optional[str] = None
    place_id: Optional[str] = None
    types: List[str] = Field(default_factory=list)
    terms: List[Dict[str, Any]] = Field(default_factory=list)
    matched_substrings: List[Dict[str, Any]] = Field(default_factory=list)
