"""Unit tests for the path revalidators."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from infrastructure.cache import revalidator as revalidator_module
from infrastructure.cache.provider import Views
from infrastructure.cache.revalidator import (
    HttpPathRevalidator,
    LoggingPathRevalidator,
    create_path_revalidator,
)


def _mock_client(post: AsyncMock) -> MagicMock:
    client = MagicMock()
    client.post = post
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=None)
    return client


class TestHttpPathRevalidator:
    @pytest.mark.asyncio
    async def test_posts_unique_paths_with_secret(self):
        response = MagicMock()
        response.raise_for_status = MagicMock()
        post = AsyncMock(return_value=response)
        revalidator = HttpPathRevalidator(url="http://web/revalidate", secret="s3cret")

        with patch.object(
            revalidator_module.httpx, "AsyncClient", return_value=_mock_client(post)
        ):
            await revalidator.revalidate([*Views.TASK_LISTS, Views.TASKS])

        post.assert_awaited_once()
        args, kwargs = post.call_args
        assert args == ("http://web/revalidate",)
        assert kwargs["json"] == {"paths": ["/tasks", "/board", "/calendar"]}
        assert kwargs["headers"] == {"X-Revalidate-Secret": "s3cret"}

    @pytest.mark.asyncio
    async def test_failure_is_logged_not_raised(self):
        post = AsyncMock(side_effect=httpx.ConnectError("refused"))
        revalidator = HttpPathRevalidator(url="http://web/revalidate", secret="")

        with patch.object(
            revalidator_module.httpx, "AsyncClient", return_value=_mock_client(post)
        ):
            await revalidator.revalidate([Views.HOME])

        post.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_no_paths_no_request(self):
        revalidator = HttpPathRevalidator(url="http://web/revalidate", secret="")

        with patch.object(revalidator_module.httpx, "AsyncClient") as client_cls:
            await revalidator.revalidate([])

        client_cls.assert_not_called()


@pytest.mark.asyncio
async def test_logging_revalidator_never_raises():
    await LoggingPathRevalidator().revalidate([Views.task("abc"), Views.task("abc")])


def test_factory_without_url_logs_only():
    with patch.object(revalidator_module.settings, "revalidate_url", ""):
        assert isinstance(create_path_revalidator(), LoggingPathRevalidator)


def test_factory_with_url_posts():
    with patch.object(revalidator_module.settings, "revalidate_url", "http://web/revalidate"):
        assert isinstance(create_path_revalidator(), HttpPathRevalidator)
