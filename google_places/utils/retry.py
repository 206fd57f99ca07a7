import logging
import time
from typing import Callable

from ..models.schemas import PageResponse, RetryConfig

logger = logging.getLogger(__name__)


def attempt(
    request_fn: Callable[[], PageResponse],
    config: RetryConfig,
    sleep: Callable[[float], None] = time.sleep,
) -> PageResponse:
    """request_fn を呼び、config.statuses のステータスなら最大 max_retries 回までやり直す

    リトライ回数は1ページの取得ごとに数える。通信エラーはそのまま呼び出し元へ伝播する。
    """
    response = request_fn()
    retries = 0
    while response.status in config.statuses and retries < config.max_retries:
        retries += 1
        logger.warning(
            "Retryable status %s, retrying in %ss (%d/%d)",
            response.status, config.delay, retries, config.max_retries,
        )
        sleep(config.delay)
        response = request_fn()
    return response
