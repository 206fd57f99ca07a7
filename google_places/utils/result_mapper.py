import math
from typing import Any, Dict, List, Optional
from urllib.parse import parse_qs, urlparse

from ..models.schemas import Prediction, Review, Spot

# 型が合わない項目は例外にせず None / 空 にする


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    number = _as_float(value)
    if number is None or not math.isfinite(number):
        return default
    return int(number)


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_dict_list(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, dict)]


def as_str_list(value: Any) -> List[str]:
    """types などの文字列配列。配列でなければ空"""
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, str)]


def address_component(
    components: Optional[List[Dict[str, Any]]], component_type: str, length: str
) -> Optional[str]:
    """types に component_type を含む最初の要素から short_name / long_name を読む"""
    for component in _as_dict_list(components):
        if component_type in as_str_list(component.get("types")):
            return _as_str(component.get(length))
    return None


def _cid_from_url(url: Optional[str]) -> int:
    if not url:
        return 0
    values = parse_qs(urlparse(url).query).get("cid")
    if values and values[0].isdigit():
        return int(values[0])
    return 0


def review_from_json(json_review: Dict[str, Any]) -> Review:
    json_review = _as_dict(json_review)
    aspects = _as_dict_list(json_review.get("aspects"))
    first_aspect = aspects[0] if aspects else {}
    return Review(
        rating=_as_float(first_aspect.get("rating")),
        type=_as_str(first_aspect.get("type")),
        author_name=_as_str(json_review.get("author_name")),
        author_url=_as_str(json_review.get("author_url")),
        text=_as_str(json_review.get("text")),
        time=_as_int(json_review.get("time"), default=0),
    )


def reviews_from_json(json_reviews: Optional[List[Dict[str, Any]]]) -> List[Review]:
    return [review_from_json(r) for r in _as_dict_list(json_reviews)]


def spot_from_json(result: Dict[str, Any]) -> Spot:
    """Places APIの結果オブジェクトから Spot を作る。欠けた項目や型違いは None"""
    result = _as_dict(result)
    location = _as_dict(_as_dict(result.get("geometry")).get("location"))
    components = result.get("address_components")
    url = _as_str(result.get("url"))
    return Spot(
        reference=_as_str(result.get("reference")),
        place_id=_as_str(result.get("place_id")),
        vicinity=_as_str(result.get("vicinity")),
        lat=_as_float(location.get("lat")),
        lng=_as_float(location.get("lng")),
        name=_as_str(result.get("name")),
        icon=_as_str(result.get("icon")),
        types=as_str_list(result.get("types")),
        id=_as_str(result.get("id")),
        formatted_phone_number=_as_str(result.get("formatted_phone_number")),
        international_phone_number=_as_str(result.get("international_phone_number")),
        formatted_address=_as_str(result.get("formatted_address")),
        address_components=_as_dict_list(components) if isinstance(components, list) else None,
        street_number=address_component(components, "street_number", "short_name"),
        street=address_component(components, "route", "long_name"),
        city=address_component(components, "locality", "long_name"),
        region=address_component(components, "administrative_area_level_1", "long_name"),
        postal_code=address_component(components, "postal_code", "long_name"),
        country=address_component(components, "country", "long_name"),
        rating=_as_float(result.get("rating")),
        url=url,
        cid=_cid_from_url(url),
        website=_as_str(result.get("website")),
        reviews=reviews_from_json(result.get("reviews")),
    )


def prediction_from_json(result: Dict[str, Any]) -> Prediction:
    result = _as_dict(result)
    return Prediction(
        description=_as_str(result.get("description")),
        id=_as_str(result.get("id")),
        reference=_as_str(result.get("reference")),
        place_id=_as_str(result.get("place_id")),
        types=as_str_list(result.get("types")),
        terms=_as_dict_list(result.get("terms")),
        matched_substrings=_as_dict_list(result.get("matched_substrings")),
    )
