import logging
from typing import Any, Dict, Optional

import requests

from ..config import settings
from ..exceptions import TransportError

logger = logging.getLogger(__name__)


def _encode_value(value: Any) -> Any:
    # requests は True を "True" にしてしまうので API の表記にそろえる
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


class PlacesRequestService:
    """Places API への HTTP GET を担当するサービスクラス"""
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or settings.GOOGLE_PLACES_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.GOOGLE_PLACES_TIMEOUT
        self.session = session or requests.Session()

    def get_json(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """GETしてJSONを返す。失敗したら TransportError"""
        url = f"{self.base_url}{path}"
        # key はログに出さない
        safe_params = {k: v for k, v in params.items() if k != "key"}
        logger.debug(f"GET {url} params={safe_params}")
        try:
            response = self.session.get(
                url,
                params={k: _encode_value(v) for k, v in params.items()},
                timeout=self.timeout,
            )
            response.raise_for_status()
            body = response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"Places API request to {path} failed: {e}")
            raise TransportError(e) from e
        if not isinstance(body, dict):
            logger.error(f"Places API response from {path} is not a JSON object: {type(body).__name__}")
            raise TransportError(ValueError(f"expected a JSON object, got {type(body).__name__}"))
        return body

    def close(self):
        self.session.close()
