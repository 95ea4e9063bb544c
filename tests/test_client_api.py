from unittest import mock

import pytest
import requests

from client.api import ApiClient, ApiError


def _response(status_code, body=None, reason="OK"):
    resp = mock.Mock()
    resp.status_code = status_code
    resp.reason = reason
    if body is None:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = body
    return resp


@pytest.fixture
def session():
    return mock.Mock(spec=requests.Session)


def test_unwraps_the_success_envelope(session):
    session.request.return_value = _response(200, {"status": "success", "data": {"spaces": []}})
    api = ApiClient("http://api.local/", session=session, timeout=3)

    assert api.get("/spaces", params={"city": "Milano"}) == {"spaces": []}
    session.request.assert_called_once_with(
        "GET",
        "http://api.local/spaces",
        params={"city": "Milano"},
        json=None,
        headers={"Accept": "application/json"},
        timeout=3,
    )


def test_login_stores_the_bearer_token(session):
    session.request.side_effect = [
        _response(200, {"status": "success", "data": {"token": "tok", "user": {"id": 1}}}),
        _response(200, {"status": "success", "data": {"user": {"id": 1}}}),
    ]
    api = ApiClient("http://api.local", session=session)

    assert api.login("a@example.com", "pw") == {"id": 1}
    api.get("/auth/me")
    headers = session.request.call_args.kwargs["headers"]
    assert headers["Authorization"] == "Bearer tok"

    api.logout()
    assert "Authorization" not in api._headers()


def test_error_responses_raise_api_error(session):
    session.request.return_value = _response(
        409, {"status": "fail", "message": "already booked"}, reason="CONFLICT",
    )
    api = ApiClient("http://api.local", session=session)

    with pytest.raises(ApiError) as exc:
        api.post("/bookings", {"space_id": 1})
    assert exc.value.status_code == 409
    assert exc.value.message == "already booked"


def test_non_json_error_falls_back_to_reason(session):
    session.request.return_value = _response(502, reason="Bad Gateway")
    with pytest.raises(ApiError) as exc:
        ApiClient("http://api.local", session=session).get("/health")
    assert exc.value.message == "Bad Gateway"


def test_no_content_returns_none(session):
    session.request.return_value = _response(204)
    assert ApiClient("http://api.local", session=session).delete("/bookings/1") is None


def test_connection_errors_are_wrapped(session):
    session.request.side_effect = requests.exceptions.ConnectionError("refused")
    with pytest.raises(ApiError) as exc:
        ApiClient("http://api.local", session=session).get("/health")
    assert exc.value.status_code is None
