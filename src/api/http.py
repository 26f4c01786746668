# src/api/http.py
from typing import Any

import requests

from src.config import HTTP_TIMEOUT_S
from src.utils import report_error

USER_AGENT = "MikensMeteo/1.0 (+streamlit)"


def http_get_json(
    url: str,
    params: dict[str, Any] | None = None,
    timeout: float = HTTP_TIMEOUT_S,
) -> Any:
    """GET a JSON document; one attempt only.

    Raises requests.HTTPError for non-2xx responses, other
    requests.RequestException subclasses for transport failures and
    ValueError when the body is not JSON.
    """
    headers = {"User-Agent": USER_AGENT}
    try:
        resp = requests.get(url, params=params, timeout=timeout, headers=headers)
        resp.raise_for_status()
        return resp.json()
    except Exception as e:
        report_error(f"http_get_json: {url}", e)
        raise
