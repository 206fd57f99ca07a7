from typing import Any, Dict

from googlemaps import convert

from ..models.schemas import Endpoint, SearchRequest

DEFAULT_RADIUS = 1000

# SearchRequest.query をどのパラメータ名で送るか
_QUERY_PARAM = {
    Endpoint.TEXT_SEARCH: "query",
    Endpoint.AUTOCOMPLETE: "input",
}


def build_params(request: SearchRequest) -> Dict[str, Any]:
    """SearchRequest からクエリパラメータを組み立てる (key は含まない)"""
    params: Dict[str, Any] = {
        "sensor": request.sensor,
        "rankby": request.rankby,
        "name": request.name,
        "keyword": request.keyword,
        "language": request.language,
    }

    location = request.location
    if location is not None:
        params["location"] = convert.latlng(location)
        # rankby=distance のときは radius を送ってはいけない
        if request.rankby != "distance":
            params["radius"] = request.radius or DEFAULT_RADIUS

    query_param = _QUERY_PARAM.get(request.endpoint)
    if query_param:
        params[query_param] = request.query
    if request.endpoint is Endpoint.DETAILS:
        params["reference"] = request.reference

    # 文字列でも配列でも受け付ける
    if request.types:
        params["types"] = convert.join_list("|", request.types)

    return {k: v for k, v in params.items() if v is not None and v != ""}


def page_params(api_key: str, page_token: str) -> Dict[str, Any]:
    """2ページ目以降は key と pagetoken だけを送る"""
    return {"key": api_key, "pagetoken": page_token}
