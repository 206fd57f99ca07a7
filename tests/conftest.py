from typing import Any, Dict, List

import pytest

from google_places.services.places_service import GooglePlacesService


class FakeRequestService:
    """レスポンスを順番に返すだけの PlacesRequestService の代わり"""
    def __init__(self, bodies: List[Any]):
        self.bodies = list(bodies)
        self.calls: List[tuple] = []
        self.closed = False

    def get_json(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append((path, dict(params)))
        body = self.bodies.pop(0)
        if isinstance(body, Exception):
            raise body
        return body

    def close(self):
        self.closed = True


def result(name: str, types=None) -> Dict[str, Any]:
    return {
        "name": name,
        "types": types or ["establishment"],
        "geometry": {"location": {"lat": -33.8670522, "lng": 151.1957362}},
    }


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def make_service(sleeps):
    def _make(bodies, **kwargs):
        fake = FakeRequestService(bodies)
        kwargs.setdefault("api_key", "test-key")
        kwargs.setdefault("page_delay", 2)
        service = GooglePlacesService(request_service=fake, sleep=sleeps.append, **kwargs)
        return service, fake
    return _make
