"""HTTP client wrapper for fetching documentation pages."""

import logging
from concurrent.futures import ThreadPoolExecutor

import requests

from api_model_gen import __version__
from api_model_gen.errors import FetchError

DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = f"api-model-gen/{__version__}"


class DocumentationClient:
    """Fetches documentation pages over HTTP with a fixed per-request timeout."""

    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        logger: logging.Logger | None = None,
    ):
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = user_agent
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)

    def fetch_page(self, url: str) -> str:
        """Fetch a single page and return its body.

        Raises:
            FetchError: On network failure or a non-200 response.
        """
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(url, f"Failed to fetch page: {url} ({e})") from e

        if response.status_code != 200:
            raise FetchError(
                url,
                f"Failed to fetch page: {url} (Status: {response.status_code})",
                status_code=response.status_code,
            )
        return response.text

    def fetch_pages(self, urls: list[str]) -> dict[str, str]:
        """Fetch all *urls* concurrently and wait for every request to settle.

        Returns {url: body} for the pages that were fetched, in the order of
        *urls*. Failed URLs are logged and left out.
        """
        unique = list(dict.fromkeys(urls))
        if not unique:
            return {}

        with ThreadPoolExecutor(max_workers=len(unique)) as pool:
            futures = {url: pool.submit(self.fetch_page, url) for url in unique}

        pages: dict[str, str] = {}
        for url, future in futures.items():
            try:
                pages[url] = future.result()
            except FetchError as e:
                self.logger.warning("%s", e)
            except Exception:
                self.logger.exception("Unexpected error fetching %s", url)
        return pages
