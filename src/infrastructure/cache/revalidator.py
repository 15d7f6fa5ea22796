"""Path revalidator implementations."""

import logging
from collections.abc import Iterable

import httpx

from core.config import settings

logger = logging.getLogger(__name__)


class HttpPathRevalidator:
    """POSTs invalidated paths to the frontend's revalidation endpoint."""

    def __init__(
        self,
        url: str = settings.revalidate_url,
        secret: str = settings.revalidate_secret,
        timeout: float = 5.0,
    ) -> None:
        self._url = url
        self._secret = secret
        self._timeout = timeout

    async def revalidate(self, paths: Iterable[str]) -> None:
        unique_paths = list(dict.fromkeys(paths))
        if not unique_paths:
            return

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    self._url,
                    json={"paths": unique_paths},
                    headers={"X-Revalidate-Secret": self._secret},
                    timeout=self._timeout,
                )
                response.raise_for_status()
        except httpx.HTTPError:
            logger.exception("Failed to revalidate paths %s", unique_paths)
            return

        logger.debug("Revalidated paths %s", unique_paths)


class LoggingPathRevalidator:
    """Records invalidations in the log when no frontend hook is configured."""

    async def revalidate(self, paths: Iterable[str]) -> None:
        unique_paths = list(dict.fromkeys(paths))
        if unique_paths:
            logger.info("Paths invalidated: %s", ", ".join(unique_paths))


def create_path_revalidator() -> HttpPathRevalidator | LoggingPathRevalidator:
    """Pick the revalidator matching the current settings."""
    if settings.revalidate_url:
        return HttpPathRevalidator()
    return LoggingPathRevalidator()
