from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests

from spec_shaver.errors import FetchError, ParseError
from spec_shaver.fetcher import SchemaFetcher, fetch_document, parse_header

FIXTURES = Path(__file__).parent / "fixtures"


def _response(text: str) -> MagicMock:
    resp = MagicMock()
    resp.text = text
    resp.raise_for_status.return_value = None
    return resp


class TestSchemaFetcher:
    @patch("spec_shaver.fetcher.requests.get")
    def test_json_body(self, mock_get):
        mock_get.return_value = _response((FIXTURES / "crm.json").read_text())
        doc = SchemaFetcher().fetch("https://api.example.com/openapi.json")
        assert doc["info"]["title"] == "CRM API"

    @patch("spec_shaver.fetcher.requests.get")
    def test_yaml_body(self, mock_get):
        mock_get.return_value = _response((FIXTURES / "petstore.yaml").read_text())
        doc = fetch_document("https://petstore.example.com/openapi.yaml")
        assert "/pets" in doc["paths"]

    @patch("spec_shaver.fetcher.requests.get")
    def test_sends_headers_and_timeout(self, mock_get):
        mock_get.return_value = _response('{"openapi": "3.0.3", "paths": {}}')
        SchemaFetcher(headers={"Authorization": "Bearer t"}, timeout=5).fetch("https://x.test/spec")
        mock_get.assert_called_once_with(
            "https://x.test/spec",
            headers={"Accept": "application/json", "Authorization": "Bearer t"},
            timeout=5,
        )

    @patch("spec_shaver.fetcher.requests.get")
    def test_http_error_status(self, mock_get):
        resp = _response("")
        resp.raise_for_status.side_effect = requests.HTTPError(
            response=MagicMock(status_code=404, reason="Not Found")
        )
        mock_get.return_value = resp
        with pytest.raises(FetchError, match="Failed to fetch schema: 404 Not Found"):
            SchemaFetcher().fetch("https://x.test/missing")

    @patch("spec_shaver.fetcher.requests.get")
    def test_no_response(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("refused")
        with pytest.raises(FetchError, match="No response received from server"):
            SchemaFetcher().fetch("https://x.test/spec")

    @patch("spec_shaver.fetcher.requests.get")
    def test_timeout(self, mock_get):
        mock_get.side_effect = requests.Timeout()
        with pytest.raises(FetchError, match="No response received from server"):
            SchemaFetcher().fetch("https://x.test/spec")

    @patch("spec_shaver.fetcher.requests.get")
    def test_other_request_error(self, mock_get):
        mock_get.side_effect = requests.exceptions.InvalidURL("bad url")
        with pytest.raises(FetchError, match="Failed to fetch schema: bad url"):
            SchemaFetcher().fetch("not a url")

    @patch("spec_shaver.fetcher.requests.get")
    def test_unparsable_body(self, mock_get):
        mock_get.return_value = _response("- just\n- a list\n")
        with pytest.raises(ParseError):
            SchemaFetcher().fetch("https://x.test/spec")


class TestParseHeader:
    def test_key_value(self):
        assert parse_header("Authorization: Bearer abc") == ("Authorization", "Bearer abc")

    def test_value_with_colon(self):
        assert parse_header("X-Url: https://a.b") == ("X-Url", "https://a.b")

    def test_invalid(self):
        assert parse_header("no-colon") is None
        assert parse_header(": value") is None
