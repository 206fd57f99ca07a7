from unittest import mock

import pytest
import requests

from google_places.exceptions import TransportError
from google_places.services.request_service import PlacesRequestService


def _service(response=None, side_effect=None):
    session = mock.Mock(spec=requests.Session)
    session.get.return_value = response
    session.get.side_effect = side_effect
    return PlacesRequestService(base_url="https://example.test/place/", timeout=3, session=session), session


def test_get_json_builds_url_and_encodes_booleans():
    response = mock.Mock()
    response.json.return_value = {"status": "OK", "results": []}
    service, session = _service(response)

    body = service.get_json("/textsearch/json", {"key": "k", "query": "pizza", "sensor": False, "radius": 200})

    assert body == {"status": "OK", "results": []}
    session.get.assert_called_once_with(
        "https://example.test/place/textsearch/json",
        params={"key": "k", "query": "pizza", "sensor": "false", "radius": 200},
        timeout=3,
    )


def test_connection_error_becomes_transport_error():
    service, _ = _service(side_effect=requests.exceptions.ConnectionError("refused"))
    with pytest.raises(TransportError):
        service.get_json("/nearbysearch/json", {"key": "k"})


def test_http_error_becomes_transport_error():
    response = mock.Mock()
    response.raise_for_status.side_effect = requests.exceptions.HTTPError("500 Server Error")
    service, _ = _service(response)
    with pytest.raises(TransportError):
        service.get_json("/nearbysearch/json", {"key": "k"})


def test_invalid_json_becomes_transport_error():
    response = mock.Mock()
    response.json.side_effect = requests.exceptions.JSONDecodeError("Expecting value", "<html>", 0)
    service, _ = _service(response)
    with pytest.raises(TransportError):
        service.get_json("/nearbysearch/json", {"key": "k"})


def test_api_key_is_not_logged(caplog):
    response = mock.Mock()
    response.json.return_value = {"status": "OK"}
    service, _ = _service(response)
    with caplog.at_level("DEBUG", logger="google_places.services.request_service"):
        service.get_json("/nearbysearch/json", {"key": "secret-key", "location": "1,2"})
    assert "secret-key" not in caplog.text
    assert "location" in caplog.text


def test_close_closes_session():
    service, session = _service()
    service.close()
    session.close.assert_called_once()


@pytest.mark.parametrize("body", [["not", "a", "dict"], None, "OK"])
def test_non_object_body_becomes_transport_error(body):
    response = mock.Mock()
    response.json.return_value = body
    service, _ = _service(response)
    with pytest.raises(TransportError):
        service.get_json("/textsearch/json", {"key": "k"})
