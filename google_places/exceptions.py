"""Google Places クライアントの例外定義"""
import googlemaps


class ConfigurationError(ValueError):
    """APIキーなど必須の設定が欠けている"""


class TransportError(googlemaps.exceptions.TransportError):
    """通信エラー、HTTPエラー、JSONでない応答。リトライはしない"""


class ApiStatusError(googlemaps.exceptions.ApiError):
    """APIが OK / ZERO_RESULTS 以外のステータスを返した"""


class OverQueryLimitError(ApiStatusError):
    pass


class RequestDeniedError(ApiStatusError):
    pass


class InvalidRequestError(ApiStatusError):
    pass


class NotFoundError(ApiStatusError):
    pass


_STATUS_ERRORS = {
    "OVER_QUERY_LIMIT": OverQueryLimitError,
    "REQUEST_DENIED": RequestDeniedError,
    "INVALID_REQUEST": InvalidRequestError,
    "NOT_FOUND": NotFoundError,
}


def error_for_status(status: str, message: str | None = None) -> ApiStatusError:
    """ステータス文字列に対応する例外インスタンスを返す"""
    error_class = _STATUS_ERRORS.get(status, ApiStatusError)
    return error_class(status, message)
