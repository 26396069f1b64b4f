"""Source image retrieval over HTTP."""

from typing import Optional

import requests

from .exceptions import FetchError
from .logging_config import get_logger
from .protocols import SourceFetcher
from .scratch import scratch_file

CHUNK_SIZE = 64 * 1024


class HttpFetcher(SourceFetcher):
    """Downloads a source image into a scratch file with a single GET."""

    def __init__(self, timeout: Optional[float] = 30.0, scratch_dir: Optional[str] = None):
        self._timeout = timeout
        self._scratch_dir = scratch_dir

    def fetch(self, source_location: str) -> str:
        """
        Stream the body at ``source_location`` into a new scratch file.

        Args:
            source_location: URL of the source image

        Returns:
            Path of the scratch file

        Raises:
            FetchError: On a non-2xx response or any transport failure
        """
        logger = get_logger("img-thumbnailer.fetcher")
        logger.debug(f"Fetching {source_location}")

        try:
            response = requests.get(source_location, stream=True, timeout=self._timeout)
        except requests.RequestException as exc:
            raise FetchError(
                f"Error getting the file '{source_location}': {exc}",
                source_location=source_location,
            ) from exc

        try:
            if not 200 <= response.status_code < 300:
                raise FetchError(
                    f"Error getting the file '{source_location}': "
                    f"HTTP {response.status_code}",
                    source_location=source_location,
                    status=response.status_code,
                )

            with scratch_file(directory=self._scratch_dir) as path:
                try:
                    with open(path, "wb") as fh:
                        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                            if chunk:
                                fh.write(chunk)
                except requests.RequestException as exc:
                    raise FetchError(
                        f"Error getting the file '{source_location}': {exc}",
                        source_location=source_location,
                    ) from exc
        finally:
            response.close()

        logger.debug(f"Fetched {source_location} into {path}")
        return path
