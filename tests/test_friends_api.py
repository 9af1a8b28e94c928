from __future__ import annotations

import json
from typing import Callable

import httpx
import pytest

from friendship_client.clients.errors import MalformedResponse, NetworkError, ServerError, UnauthorizedError
from friendship_client.clients.friends_api import FriendsApiClient, split_interests
from friendship_client.schemas import RelationshipState, ToggleStatus

BASE_URL = "https://friends.test"


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> FriendsApiClient:
    return FriendsApiClient(BASE_URL, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_list_friends_sends_bearer_token_and_parses_users():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"_id": "u1", "username": "alice", "interests": ["chess", "go"]}])

    async with _client(handler) as client:
        friends = await client.list_friends("tok")

    assert seen[0].method == "GET"
    assert seen[0].url.path == "/friends"
    assert seen[0].headers["Authorization"] == "Bearer tok"
    assert friends[0].id == "u1"
    assert friends[0].username == "alice"
    assert friends[0].interests == frozenset({"chess", "go"})


@pytest.mark.asyncio
async def test_recommendations_and_pending_requests_are_parsed():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/friends/recommendations":
            return httpx.Response(
                200,
                json=[
                    {"user": {"_id": "u2", "username": "bob"}, "mutualFriends": 3, "mutualInterests": 1},
                    {"user": {"_id": "u3", "username": "carol"}, "mutualFriends": 1},
                ],
            )
        return httpx.Response(
            200,
            json=[
                {"_id": "u4", "username": "dave"},
                {"_id": "req-9", "requester": {"_id": "u5", "username": "erin"}},
            ],
        )

    async with _client(handler) as client:
        recommendations = await client.list_recommendations("tok")
        pending = await client.list_pending_requests("tok")

    assert [rec.user.username for rec in recommendations] == ["bob", "carol"]
    assert recommendations[0].mutual_friend_count == 3
    assert recommendations[0].mutual_interest_count == 1
    assert recommendations[1].mutual_interest_count == 0
    assert [(entry.id, entry.requester.id) for entry in pending] == [("u4", "u4"), ("req-9", "u5")]


@pytest.mark.asyncio
@pytest.mark.parametrize("wrapped", [False, True])
async def test_search_users_maps_request_status(wrapped: bool):
    items = [
        {"_id": "u1", "username": "alice", "requestStatus": "none"},
        {"_id": "u2", "username": "alina", "requestStatus": "requested"},
        {"_id": "u3", "username": "alix", "requestStatus": "friend"},
    ]
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        body = {"query": "ali", "results": items} if wrapped else items
        return httpx.Response(200, json=body)

    async with _client(handler) as client:
        results = await client.search_users("tok", "ali")

    assert seen[0].url.path == "/friends/search"
    assert seen[0].url.params["username"] == "ali"
    assert [result.state for result in results] == [
        RelationshipState.NONE,
        RelationshipState.REQUESTED_OUTGOING,
        RelationshipState.FRIEND,
    ]


@pytest.mark.asyncio
async def test_toggle_friend_request_posts_and_reads_status():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"status": "canceled", "message": "Request withdrawn"})

    async with _client(handler) as client:
        result = await client.toggle_friend_request("tok", "u2")

    assert seen[0].method == "POST"
    assert seen[0].url.path == "/friends/request/u2"
    assert result.status == ToggleStatus.CANCELLED
    assert result.requested is False
    assert result.state == RelationshipState.NONE
    assert result.message == "Request withdrawn"


@pytest.mark.asyncio
async def test_accept_and_unfriend_tolerate_empty_bodies():
    paths: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        return httpx.Response(200)

    async with _client(handler) as client:
        assert await client.accept_friend_request("tok", "u5") is None
        assert await client.unfriend("tok", "u1") is None

    assert paths == ["/friends/accept/u5", "/friends/unfriend/u1"]


@pytest.mark.asyncio
async def test_accept_and_unfriend_tolerate_plain_text_bodies():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.startswith("/friends/accept/"):
            return httpx.Response(200, text="Friend request accepted")
        return httpx.Response(200, text="Unfriended")

    async with _client(handler) as client:
        assert await client.accept_friend_request("tok", "u5") is None
        assert await client.unfriend("tok", "u1") is None


@pytest.mark.asyncio
async def test_login_posts_credentials_without_bearer_header():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"token": "fresh", "userId": 42})

    async with _client(handler) as client:
        result = await client.login("alice", "s3cret")

    assert seen[0].method == "POST"
    assert seen[0].url.path == "/auth/login"
    assert "Authorization" not in seen[0].headers
    assert json.loads(seen[0].content) == {"username": "alice", "password": "s3cret"}
    assert result.token == "fresh"
    assert result.user_id == "42"


@pytest.mark.asyncio
async def test_register_splits_comma_separated_interests():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"token": "new-tok", "userId": "u9"})

    async with _client(handler) as client:
        result = await client.register("bob", "pw", "chess, go ,, hiking")

    assert seen[0].url.path == "/auth/register"
    assert json.loads(seen[0].content) == {
        "username": "bob",
        "password": "pw",
        "interests": ["chess", "go", "hiking"],
    }
    assert (result.token, result.user_id) == ("new-tok", "u9")


@pytest.mark.asyncio
async def test_rejected_login_raises_unauthorized_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"message": "Invalid credentials"})

    async with _client(handler) as client:
        with pytest.raises(UnauthorizedError, match="Invalid credentials"):
            await client.login("alice", "wrong")


@pytest.mark.asyncio
async def test_login_without_token_is_malformed():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"userId": "u1"})

    async with _client(handler) as client:
        with pytest.raises(MalformedResponse):
            await client.login("alice", "s3cret")


@pytest.mark.parametrize(
    ("interests", "expected"),
    [
        ("", []),
        ("chess", ["chess"]),
        (" chess , go,", ["chess", "go"]),
        (["  music", "", "art "], ["music", "art"]),
    ],
)
def test_split_interests(interests, expected):
    assert split_interests(interests) == expected


@pytest.mark.asyncio
async def test_unauthorized_response_raises_unauthorized_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"message": "Token expired"})

    async with _client(handler) as client:
        with pytest.raises(UnauthorizedError) as exc:
            await client.list_friends("stale")

    assert exc.value.status_code == 401
    assert str(exc.value) == "Token expired"


@pytest.mark.asyncio
async def test_server_error_carries_status_and_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"detail": "database unavailable"})

    async with _client(handler) as client:
        with pytest.raises(ServerError) as exc:
            await client.unfriend("tok", "u1")

    assert exc.value.status_code == 500
    assert str(exc.value) == "database unavailable"
    assert not isinstance(exc.value, UnauthorizedError)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, content=b"<html>oops</html>"),
        httpx.Response(200, json={"unexpected": True}),
        httpx.Response(200, json=[{"username": "missing-id"}]),
    ],
)
async def test_unexpected_payload_raises_malformed_response(response: httpx.Response):
    def handler(request: httpx.Request) -> httpx.Response:
        return response

    async with _client(handler) as client:
        with pytest.raises(MalformedResponse):
            await client.list_friends("tok")


@pytest.mark.asyncio
async def test_unknown_relationship_status_is_malformed():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=json.dumps([{"_id": "u1", "username": "a", "requestStatus": "blocked"}]))

    async with _client(handler) as client:
        with pytest.raises(MalformedResponse):
            await client.search_users("tok", "a")


@pytest.mark.asyncio
@pytest.mark.parametrize("error_type", [httpx.ConnectError, httpx.ReadTimeout])
async def test_transport_failures_raise_network_error(error_type: type[httpx.TransportError]):
    def handler(request: httpx.Request) -> httpx.Response:
        raise error_type("unreachable", request=request)

    async with _client(handler) as client:
        with pytest.raises(NetworkError):
            await client.list_pending_requests("tok")
