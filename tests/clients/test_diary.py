"""Tests for the diary REST client."""

import httpx
import pytest
import respx

from reelay.clients.base import DiaryError
from reelay.clients.diary import DiaryClient
from tests.fixtures.diary_responses import DIARY_ROWS, EMPTY_DIARY_RESPONSE, MALFORMED_DIARY_ROWS

BASE_URL = "https://demo.supabase.co"
DIARY_URL = f"{BASE_URL}/rest/v1/diary"


def make_client(**kwargs) -> DiaryClient:
    return DiaryClient(base_url=BASE_URL, api_key="anon-key", **kwargs)


class TestDiaryClient:
    """Test cases for DiaryClient."""

    @pytest.mark.asyncio
    async def test_client_initialization(self):
        """Base URL gains the REST prefix and auth headers are set."""
        async with make_client(access_token="user-jwt") as client:
            assert str(client._client.base_url) == f"{BASE_URL}/rest/v1/"
            assert client._client.headers["apikey"] == "anon-key"
            assert client._client.headers["Authorization"] == "Bearer user-jwt"

    @pytest.mark.asyncio
    async def test_api_key_used_as_bearer_without_token(self):
        async with DiaryClient(base_url=f"{BASE_URL}/rest/v1/", api_key="anon-key") as client:
            assert client._client.headers["Authorization"] == "Bearer anon-key"
            assert str(client._client.base_url) == f"{BASE_URL}/rest/v1/"

    @pytest.mark.asyncio
    @respx.mock
    async def test_list_movies_single_batch(self):
        route = respx.get(DIARY_URL).mock(return_value=httpx.Response(200, json=DIARY_ROWS))

        async with make_client(user_id="user-1") as client:
            movies = await client.list_movies()

        assert [movie.id for movie in movies] == [101, 102, 103]
        params = route.calls[0].request.url.params
        assert params["select"] == "*"
        assert params["user_id"] == "eq.user-1"
        assert params["order"] == "watched_date.desc,id.desc"
        assert params["offset"] == "0"

    @pytest.mark.asyncio
    @respx.mock
    async def test_list_movies_pages_until_short_batch(self):
        route = respx.get(DIARY_URL).mock(
            side_effect=[
                httpx.Response(200, json=DIARY_ROWS[:2]),
                httpx.Response(200, json=DIARY_ROWS[2:]),
            ]
        )

        async with make_client(batch_size=2) as client:
            movies = await client.list_movies()

        assert len(movies) == 3
        assert route.call_count == 2
        assert route.calls[1].request.url.params["offset"] == "2"
        assert route.calls[1].request.url.params["limit"] == "2"
        assert "user_id" not in route.calls[0].request.url.params

    @pytest.mark.asyncio
    @respx.mock
    async def test_list_movies_empty(self):
        respx.get(DIARY_URL).mock(return_value=httpx.Response(200, json=EMPTY_DIARY_RESPONSE))

        async with make_client() as client:
            assert await client.list_movies() == []

    @pytest.mark.asyncio
    @respx.mock
    async def test_malformed_rows_are_skipped(self):
        respx.get(DIARY_URL).mock(return_value=httpx.Response(200, json=MALFORMED_DIARY_ROWS))

        async with make_client() as client:
            movies = await client.list_movies()

        assert [movie.title for movie in movies] == ["Heat"]

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_movie(self):
        route = respx.get(DIARY_URL).mock(return_value=httpx.Response(200, json=DIARY_ROWS[:1]))

        async with make_client() as client:
            movie = await client.get_movie(101)

        assert movie is not None
        assert movie.title == "The Matrix"
        assert route.calls[0].request.url.params["id"] == "eq.101"

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_movie_not_found(self):
        respx.get(DIARY_URL).mock(return_value=httpx.Response(200, json=[]))

        async with make_client() as client:
            assert await client.get_movie(999) is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_transient_error_is_retried(self):
        route = respx.get(DIARY_URL).mock(
            side_effect=[
                httpx.Response(503, json={"message": "unavailable"}),
                httpx.Response(200, json=DIARY_ROWS),
            ]
        )

        async with make_client() as client:
            movies = await client.list_movies()

        assert len(movies) == 3
        assert route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_persistent_error_raises(self):
        route = respx.get(DIARY_URL).mock(return_value=httpx.Response(401, json={"message": "denied"}))

        async with make_client() as client:
            with pytest.raises(httpx.HTTPStatusError):
                await client.list_movies()

        assert route.call_count == 3

    @pytest.mark.asyncio
    @respx.mock
    async def test_non_json_response_raises_diary_error(self):
        route = respx.get(DIARY_URL).mock(
            return_value=httpx.Response(200, content=b"<html>maintenance</html>")
        )

        async with make_client() as client:
            with pytest.raises(DiaryError, match="non-JSON"):
                await client.list_movies()

        assert route.call_count == 1
