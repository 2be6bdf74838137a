"""Tests for the requests-based API client."""

import json

import pytest
import requests

from trip_planner_client import TripPlannerAPI, convert


def make_response(status_code, body=None, url="http://api.test/api"):
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    if body is not None:
        response._content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    else:
        response._content = b""
    return response


class FakeSession:
    """Records requests and replays canned responses."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, **kwargs):
        self.calls.append(kwargs)
        result = self.responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


def test_login_stores_token_for_later_calls():
    session = FakeSession(
        make_response(200, {"message": "Login successful", "token": "abc", "user": {"id": 1, "email": "a@b.co"}}),
        make_response(200, []),
    )
    api = TripPlannerAPI(base_url="http://api.test/api/", session=session)

    data, error = api.login("a@b.co", "secret1")
    assert error is None
    assert data["token"] == "abc"

    trips, error = api.list_trips()
    assert trips == [] and error is None
    assert session.calls[1]["url"] == "http://api.test/api/trips"
    assert session.calls[1]["headers"] == {"Authorization": "Bearer abc"}


def test_error_message_comes_from_error_field():
    session = FakeSession(make_response(404, {"error": "Trip not found"}))
    api = TripPlannerAPI(base_url="http://api.test/api", token="abc", session=session)

    data, error = api.get_trip(42)
    assert data is None
    assert error == {"status_code": 404, "message": "Trip not found"}


def test_create_trip_omits_missing_description():
    session = FakeSession(make_response(201, {"id": 1}))
    api = TripPlannerAPI(base_url="http://api.test/api", token="abc", session=session)

    api.create_trip("Paris Trip", "Paris", 1200.5)
    assert session.calls[0]["json"] == {"title": "Paris Trip", "location": "Paris", "price": 1200.5}


def test_update_sends_only_given_fields():
    session = FakeSession(make_response(200, {"id": 1, "price": 10}))
    api = TripPlannerAPI(base_url="http://api.test/api", token="abc", session=session)

    api.update_trip(1, price=10)
    assert session.calls[0]["method"] == "PUT"
    assert session.calls[0]["json"] == {"price": 10}


def test_network_errors_are_reported():
    session = FakeSession(requests.ConnectionError("refused"))
    api = TripPlannerAPI(base_url="http://api.test/api", session=session)

    ok, error = api.delete_trip(1)
    assert ok is False
    assert error["status_code"] is None
    assert "refused" in error["message"]


def test_logout_forgets_token():
    api = TripPlannerAPI(base_url="http://api.test/api", token="abc", session=FakeSession())
    api.logout()
    assert api.token is None


@pytest.mark.parametrize(
    "amount,source,target,expected",
    [
        (100, "USD", "EUR", 92.0),
        (92, "EUR", "USD", 100.0),
        (10, "EUR", "CNY", 79.3478),
        (5, "USD", "XYZ", 5.0),
    ],
)
def test_convert(amount, source, target, expected):
    rates = {"USD": 1.0, "EUR": 0.92, "CNY": 7.3}
    assert convert(amount, source, target, rates) == expected
