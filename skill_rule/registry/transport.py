import json
import logging
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from skill_rule.constants import HTTP_TIMEOUT_SECONDS, USER_AGENT
from skill_rule.errors import RegistryRequestError

logger = logging.getLogger(__name__)


def fetch_text(
    url: str,
    headers: dict[str, str] | None = None,
    timeout: int = HTTP_TIMEOUT_SECONDS,
) -> str:
    request_headers = {"User-Agent": USER_AGENT}
    request_headers.update(headers or {})
    logger.debug("GET %s", url)
    try:
        request = Request(url, headers=request_headers)
        with urlopen(request, timeout=timeout) as response:
            return response.read().decode("utf-8")
    except HTTPError as exc:
        raise RegistryRequestError(url, f"HTTP {exc.code}") from exc
    except URLError as exc:
        raise RegistryRequestError(url, str(exc.reason)) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise RegistryRequestError(url, str(exc)) from exc


def fetch_json(
    url: str,
    headers: dict[str, str] | None = None,
    timeout: int = HTTP_TIMEOUT_SECONDS,
) -> Any:
    payload = fetch_text(url, headers=headers, timeout=timeout)
    try:
        return json.loads(payload)
    except ValueError as exc:
        raise RegistryRequestError(url, f"invalid JSON: {exc}") from exc
