import logging
import time
from typing import Any, Callable, Dict, Iterator, List, Optional

from ..config import settings
from ..exceptions import ApiStatusError, ConfigurationError, NotFoundError, error_for_status
from ..models.schemas import Endpoint, PageResponse, Prediction, RetryConfig, SearchRequest, Spot
from ..utils.query_builder import build_params, page_params
from ..utils.result_mapper import as_str_list, prediction_from_json, spot_from_json
from ..utils.retry import attempt
from .request_service import PlacesRequestService

logger = logging.getLogger(__name__)


class GooglePlacesService:
    """Google Places API のクライアント

    APIキーはインスタンスごとに保持する。省略時は settings.GOOGLE_MAPS_API_KEY を使う。
    """
    def __init__(
        self,
        api_key: Optional[str] = None,
        request_service: Optional[PlacesRequestService] = None,
        page_delay: Optional[float] = None,
        language: Optional[str] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.api_key = settings.GOOGLE_MAPS_API_KEY if api_key is None else api_key
        self.request_service = request_service or PlacesRequestService()
        self.page_delay = settings.GOOGLE_PLACES_PAGE_DELAY if page_delay is None else page_delay
        self.language = language or settings.GOOGLE_PLACES_LANGUAGE
        self.sleep = sleep
        if not self.api_key:
            logger.warning("GooglePlacesService initialized without an API key.")

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self):
        self.request_service.close()

    def _check_api_key(self):
        if not self.api_key:
            logger.error("Google Places API key is not configured.")
            raise ConfigurationError("Google Places API key is not configured.")

    def _fetch_page(self, endpoint: Endpoint, params: Dict[str, Any]) -> PageResponse:
        body = self.request_service.get_json(endpoint.path, params)
        return PageResponse.from_json(body, endpoint)

    def _request_page(self, endpoint: Endpoint, params: Dict[str, Any], retry: RetryConfig) -> PageResponse:
        """1ページ分を取得する。リトライはこのページの中だけで数える"""
        response = attempt(lambda: self._fetch_page(endpoint, params), retry, sleep=self.sleep)
        if not response.ok:
            logger.error(f"Places API {endpoint.value} error: {response.status} ({response.error_message})")
            raise error_for_status(response.status, response.error_message)
        return response

    def search(self, request: SearchRequest) -> Iterator[Dict[str, Any]]:
        """検索してページをたどり、除外タイプに当たらない結果を1件ずつ返す"""
        self._check_api_key()
        params = build_params(request)
        params["key"] = self.api_key
        return self._iter_results(request, params)

    def _iter_results(self, request: SearchRequest, params: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
        endpoint = request.endpoint
        page = 1
        while True:
            logger.info(f"Places API {endpoint.value} request (page {page})")
            response = self._request_page(endpoint, params, request.retry)
            logger.info(f"Places API {endpoint.value} page {page}: status {response.status}, {len(response.results)} results")

            for result in response.results:
                if request.exclude.isdisjoint(as_str_list(result.get("types"))):
                    yield result
                else:
                    logger.debug(f"Excluded result: {result.get('name')}")

            if not response.next_page_token:
                return
            # next_page_token はすぐには有効にならない
            self.sleep(self.page_delay)
            params = page_params(self.api_key, response.next_page_token)
            page += 1

    def _build_request(self, endpoint: Endpoint, **options) -> SearchRequest:
        # None は「指定なし」として扱い、モデルのデフォルトに任せる
        options = {k: v for k, v in options.items() if v is not None}
        if options.get("language") is None:
            options["language"] = self.language
        return SearchRequest(endpoint=endpoint, **options)

    def iter_spots(self, lat: float, lng: float, sensor: bool = False, **options) -> Iterator[Spot]:
        """指定地点の周辺を検索する (nearbysearch)

        options: radius, rankby, types, name, keyword, language, exclude, retry
        """
        request = self._build_request(Endpoint.NEARBY_SEARCH, lat=lat, lng=lng, sensor=sensor, **options)
        for result in self.search(request):
            yield spot_from_json(result)

    def list_spots(self, lat: float, lng: float, sensor: bool = False, **options) -> List[Spot]:
        return list(self.iter_spots(lat, lng, sensor, **options))

    def iter_spots_by_query(self, query: str, sensor: bool = False, **options) -> Iterator[Spot]:
        """テキストクエリで検索する (textsearch)

        options: lat, lng, radius, rankby, types, language, exclude, retry
        """
        request = self._build_request(Endpoint.TEXT_SEARCH, query=query, sensor=sensor, **options)
        for result in self.search(request):
            yield spot_from_json(result)

    def list_spots_by_query(self, query: str, sensor: bool = False, **options) -> List[Spot]:
        return list(self.iter_spots_by_query(query, sensor, **options))

    def find_spot(
        self,
        reference: str,
        sensor: bool = False,
        language: Optional[str] = None,
        retry: Optional[RetryConfig] = None,
    ) -> Spot:
        """reference から場所の詳細情報を取得する"""
        request = self._build_request(
            Endpoint.DETAILS,
            reference=reference,
            sensor=sensor,
            language=language,
            retry=retry,
        )
        try:
            results = list(self.search(request))
        except ApiStatusError as e:
            logger.error(f"Place details lookup failed for reference {reference}: {e}")
            raise
        if not results:
            raise NotFoundError("NOT_FOUND", f"No result for reference {reference}")
        return spot_from_json(results[0])

    def list_predictions(self, input_text: str, sensor: bool = False, **options) -> List[Prediction]:
        """入力文字列から候補を取得する (autocomplete)

        options: lat, lng, radius, types, language, retry
        """
        request = self._build_request(Endpoint.AUTOCOMPLETE, query=input_text, sensor=sensor, **options)
        return [prediction_from_json(result) for result in self.search(request)]
