"""HTTP client for fetching OpenAPI documents from a URL."""

import requests

from spec_shaver.errors import FetchError, ParseError
from spec_shaver.parser.swagger import parse_document

DEFAULT_TIMEOUT = 30.0


class SchemaFetcher:
    """Wrapper around ``requests`` that turns transport failures into FetchError."""

    def __init__(self, headers: dict[str, str] | None = None, timeout: float = DEFAULT_TIMEOUT):
        self.headers = headers or {}
        self.timeout = timeout

    def fetch(self, url: str) -> dict:
        """GET ``url`` and parse the body as JSON, falling back to YAML."""
        try:
            response = requests.get(
                url,
                headers={"Accept": "application/json", **self.headers},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.HTTPError as e:
            resp = e.response
            raise FetchError(f"Failed to fetch schema: {resp.status_code} {resp.reason}") from e
        except (requests.ConnectionError, requests.Timeout) as e:
            raise FetchError("Failed to fetch schema: No response received from server") from e
        except requests.RequestException as e:
            raise FetchError(f"Failed to fetch schema: {e}") from e

        try:
            return parse_document(response.text, fmt="json", source=url)
        except ParseError:
            # Not JSON; many servers publish YAML
            return parse_document(response.text, fmt="yaml", source=url)


def fetch_document(url: str, headers: dict[str, str] | None = None, timeout: float = DEFAULT_TIMEOUT) -> dict:
    return SchemaFetcher(headers=headers, timeout=timeout).fetch(url)


def parse_header(header: str) -> tuple[str, str] | None:
    """Split "Key: Value" into ("Key", "Value"); None if there is no key."""
    key, sep, value = header.partition(":")
    if not sep or not key.strip():
        return None
    return key.strip(), value.strip()
