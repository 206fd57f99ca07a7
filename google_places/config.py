import os
from dotenv import load_dotenv

# .envファイルを読み込む
load_dotenv()


def _optional_float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value else default


class Settings:
    """クライアント設定"""
    # 環境変数から読み込む、なければ空文字
    GOOGLE_MAPS_API_KEY: str = os.getenv("GOOGLE_MAPS_API_KEY", "")
    GOOGLE_PLACES_BASE_URL: str = os.getenv(
        "GOOGLE_PLACES_BASE_URL", "https://maps.googleapis.com/maps/api/place"
    )
    # 秒単位
    GOOGLE_PLACES_TIMEOUT: float = _optional_float("GOOGLE_PLACES_TIMEOUT", 10.0)
    # next_page_token が有効になるまでの待ち時間
    GOOGLE_PLACES_PAGE_DELAY: float = _optional_float("GOOGLE_PLACES_PAGE_DELAY", 2.0)
    GOOGLE_PLACES_LANGUAGE: str | None = os.getenv("GOOGLE_PLACES_LANGUAGE") or None

settings = Settings()
