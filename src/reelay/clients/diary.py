from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from reelay import __version__
from reelay.clients.base import DiaryError, parse_movie_rows
from reelay.models import Movie

DEFAULT_TIMEOUT = 20.0
DEFAULT_BATCH_SIZE = 1000
USER_AGENT = f"reelay/{__version__}"
DIARY_TABLE = "/diary"


class DiaryClient:
    """Thin asynchronous read-only wrapper around the hosted diary REST API."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        access_token: str | None = None,
        user_id: str | None = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        normalized_url = base_url.rstrip("/")
        if not normalized_url.endswith("/rest/v1"):
            normalized_url = f"{normalized_url}/rest/v1"

        headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {access_token or api_key}",
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
        }
        self._user_id = user_id
        self._batch_size = max(1, batch_size)
        self._client = httpx.AsyncClient(
            base_url=normalized_url,
            headers=headers,
            timeout=timeout,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def list_movies(self) -> list[Movie]:
        """Fetch every diary row, newest watch first, one batch at a time."""
        movies: list[Movie] = []
        offset = 0
        while True:
            rows = await self._get_json(
                DIARY_TABLE,
                params=self._params(
                    order="watched_date.desc,id.desc",
                    offset=offset,
                    limit=self._batch_size,
                ),
            )
            movies.extend(parse_movie_rows(rows))
            if not isinstance(rows, list) or len(rows) < self._batch_size:
                break
            offset += self._batch_size
        return movies

    async def get_movie(self, movie_id: int) -> Movie | None:
        rows = await self._get_json(DIARY_TABLE, params=self._params(id=f"eq.{movie_id}", limit=1))
        movies = parse_movie_rows(rows)
        return movies[0] if movies else None

    def _params(self, **extra: Any) -> dict[str, Any]:
        params: dict[str, Any] = {"select": "*"}
        if self._user_id:
            params["user_id"] = f"eq.{self._user_id}"
        params.update(extra)
        return params

    async def _get_json(self, path: str, *, params: Mapping[str, Any]) -> Any:
        async for attempt in _retry_policy():
            with attempt:
                response = await self._client.get(path, params=params)
                response.raise_for_status()
                try:
                    return response.json()
                except ValueError as exc:
                    raise DiaryError(f"Diary service returned a non-JSON response for {path}") from exc
        raise RuntimeError("Unable to fetch diary rows after retries")

    async def __aenter__(self) -> DiaryClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # type: ignore[override]
        await self.close()


def _retry_policy() -> AsyncRetrying:
    return AsyncRetrying(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, max=6),
        retry=retry_if_exception_type((httpx.HTTPStatusError, httpx.TransportError)),
        reraise=True,
    )


__all__ = ["DiaryClient"]
