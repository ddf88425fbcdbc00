import httpx

from specsheets.documents.exceptions import FetchError


class RemoteContentFetcher:
    """Downloads document content referenced by URL."""

    def __init__(
        self,
        timeout_seconds: float = 30,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._timeout = timeout_seconds
        self._transport = transport

    def fetch(self, url: str) -> bytes:
        """Return the response body for ``url``.

        Raises:
            FetchError: on an invalid URL, transport failure, timeout or a non-2xx status.
        """
        try:
            with httpx.Client(
                timeout=self._timeout,
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                response = client.get(url)
                response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise FetchError(f"Timed out fetching {url}") from exc
        except httpx.HTTPStatusError as exc:
            raise FetchError(
                f"Fetching {url} returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.InvalidURL as exc:
            raise FetchError(f"Invalid document URL {url}: {exc}") from exc
        except httpx.HTTPError as exc:
            raise FetchError(f"Failed to fetch {url}: {exc}") from exc
        return response.content
