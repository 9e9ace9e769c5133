import pytest
import requests

from discord_notify.dispatch.client import API_BASE, DiscordClient
from discord_notify.dispatch.dispatcher import dispatch
from discord_notify.errors import HttpError, MalformedResponseError
from discord_notify.models import DispatchMode, ResolvedConfig

CFG = ResolvedConfig(token="tok123", channel_or_user_id="42")


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else ""

    def json(self):
        if self._body is None:
            raise ValueError("no json")
        return self._body


class FakeSession:
    """Hands out queued responses (or raises queued exceptions) in order."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        resp = self.responses.pop(0)
        if isinstance(resp, Exception):
            raise resp
        return resp


def test_channel_mode_posts_once():
    s = FakeSession([FakeResponse(200, {"id": "m1"})])
    dispatch(DispatchMode.CHANNEL, CFG, "hello", session=s)

    assert len(s.calls) == 1
    call = s.calls[0]
    assert call["url"] == f"{API_BASE}/channels/42/messages"
    assert call["json"] == {"content": "hello"}
    assert call["headers"] == {"authorization": "Bot tok123"}
    assert call["timeout"] is not None

def test_dm_mode_opens_channel_then_posts_to_returned_id():
    s = FakeSession([FakeResponse(200, {"id": "dm-999", "type": 1}), FakeResponse(200, {"id": "m1"})])
    dispatch(DispatchMode.DIRECT_MESSAGE, CFG, "hello", session=s)

    assert [c["url"] for c in s.calls] == [
        f"{API_BASE}/users/@me/channels",
        f"{API_BASE}/channels/dm-999/messages",
    ]
    assert s.calls[0]["json"] == {"recipient_id": "42"}
    assert s.calls[1]["json"] == {"content": "hello"}
    assert all(c["headers"] == {"authorization": "Bot tok123"} for c in s.calls)

def test_dm_missing_id_is_malformed_and_skips_post():
    s = FakeSession([FakeResponse(200, {"type": 1})])
    with pytest.raises(MalformedResponseError) as exc:
        dispatch(DispatchMode.DIRECT_MESSAGE, CFG, "hello", session=s)
    assert exc.value.stage == "channel-open"
    assert len(s.calls) == 1

@pytest.mark.parametrize("body", [{"id": 12345}, {"id": None}, {"id": ""}, ["dm-1"]])
def test_dm_non_string_id_is_malformed(body):
    s = FakeSession([FakeResponse(200, body)])
    with pytest.raises(MalformedResponseError):
        dispatch(DispatchMode.DIRECT_MESSAGE, CFG, "hello", session=s)
    assert len(s.calls) == 1

def test_dm_non_json_body_is_malformed():
    s = FakeSession([FakeResponse(200, None, text="<html>")])
    with pytest.raises(MalformedResponseError):
        dispatch(DispatchMode.DIRECT_MESSAGE, CFG, "hello", session=s)

def test_dm_open_failure_never_posts():
    s = FakeSession([FakeResponse(403, {"message": "Cannot send messages to this user", "code": 50007})])
    with pytest.raises(HttpError) as exc:
        dispatch(DispatchMode.DIRECT_MESSAGE, CFG, "hello", session=s)
    assert exc.value.status == 403
    assert exc.value.stage == "channel-open"
    assert "Cannot send messages to this user" in str(exc.value)
    assert len(s.calls) == 1

def test_dm_post_failure_is_reported_from_post_step():
    s = FakeSession([FakeResponse(200, {"id": "dm-1"}), FakeResponse(500, None, text="oops")])
    with pytest.raises(HttpError) as exc:
        dispatch(DispatchMode.DIRECT_MESSAGE, CFG, "hello", session=s)
    assert exc.value.status == 500
    assert exc.value.stage == "message-post"
    assert "HTTP 500" in str(exc.value)
    assert len(s.calls) == 2

def test_channel_mode_http_error():
    s = FakeSession([FakeResponse(404, {"message": "Unknown Channel", "code": 10003})])
    with pytest.raises(HttpError) as exc:
        dispatch(DispatchMode.CHANNEL, CFG, "hello", session=s)
    assert exc.value.status == 404
    assert str(exc.value) == "message-post failed: HTTP 404 (Unknown Channel)"

def test_transport_error_wrapped():
    s = FakeSession([requests.ConnectionError("connection refused")])
    with pytest.raises(HttpError) as exc:
        dispatch(DispatchMode.CHANNEL, CFG, "hello", session=s)
    assert exc.value.status is None
    assert isinstance(exc.value.cause, requests.ConnectionError)
    assert "connection refused" in str(exc.value)

def test_dm_mode_does_not_validate_target():
    # a channel id passed with --dm is still sent as a recipient
    cfg = ResolvedConfig(token="tok123", channel_or_user_id="channel-77")
    s = FakeSession([FakeResponse(200, {"id": "dm-1"}), FakeResponse(204)])
    dispatch(DispatchMode.DIRECT_MESSAGE, cfg, "x", session=s)
    assert s.calls[0]["json"] == {"recipient_id": "channel-77"}

def test_token_not_in_repr_or_errors():
    s = FakeSession([FakeResponse(401, {"message": "401: Unauthorized"})])
    with pytest.raises(HttpError) as exc:
        dispatch(DispatchMode.CHANNEL, CFG, "hello", session=s)
    assert "tok123" not in str(exc.value)
    assert "tok123" not in repr(CFG)

def test_client_custom_base_url():
    s = FakeSession([FakeResponse(200)])
    DiscordClient("t", session=s, base_url="http://localhost:8080/api/").post_message("1", "x")
    assert s.calls[0]["url"] == "http://localhost:8080/api/channels/1/messages"
