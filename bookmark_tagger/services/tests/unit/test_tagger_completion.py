"""Unit tests for the pydantic-ai completion service (Agent mocked)."""

import asyncio

import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from bookmark_tagger.services.tagger.completion import PydanticAICompletionService

AGENT_PATH = "bookmark_tagger.services.tagger.completion.Agent"


def mock_result(output: str) -> MagicMock:
    result = MagicMock()
    result.output = output
    return result


class TestPydanticAICompletionService:
    """Test cases for PydanticAICompletionService."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_complete_returns_output(self):
        with patch(AGENT_PATH) as mock_agent_cls:
            mock_agent_cls.return_value.run = AsyncMock(return_value=mock_result('["react"]'))
            service = PydanticAICompletionService("test-model", max_retries=0)

            reply = await service.complete(
                "system prompt", "user content", max_output_tokens=200, temperature=0.1
            )

        assert reply == '["react"]'
        mock_agent_cls.assert_called_once_with(
            "test-model",
            system_prompt="system prompt",
            model_settings={"max_tokens": 200, "temperature": 0.1, "timeout": 30.0},
        )
        mock_agent_cls.return_value.run.assert_awaited_once_with("user content")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_no_timeout_setting_when_disabled(self):
        with patch(AGENT_PATH) as mock_agent_cls:
            mock_agent_cls.return_value.run = AsyncMock(return_value=mock_result("[]"))
            service = PydanticAICompletionService("test-model", request_timeout=None)

            await service.complete("s", "u", max_output_tokens=100)

        settings = mock_agent_cls.call_args.kwargs["model_settings"]
        assert "timeout" not in settings
        assert settings["max_tokens"] == 100

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_retries_transient_errors(self):
        with patch(AGENT_PATH) as mock_agent_cls:
            mock_agent_cls.return_value.run = AsyncMock(
                side_effect=[httpx.ConnectError("reset"), mock_result("[]")]
            )
            service = PydanticAICompletionService(
                "test-model", max_retries=2, retry_base_delay=0
            )

            reply = await service.complete("s", "u", max_output_tokens=100)

        assert reply == "[]"
        assert mock_agent_cls.return_value.run.await_count == 2

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_non_transient_errors_not_retried(self):
        with patch(AGENT_PATH) as mock_agent_cls:
            mock_agent_cls.return_value.run = AsyncMock(side_effect=ValueError("bad request"))
            service = PydanticAICompletionService(
                "test-model", max_retries=2, retry_base_delay=0
            )

            with pytest.raises(ValueError):
                await service.complete("s", "u", max_output_tokens=100)

        assert mock_agent_cls.return_value.run.await_count == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_request_timeout(self):
        async def slow_run(user_content):
            await asyncio.sleep(5)

        with patch(AGENT_PATH) as mock_agent_cls:
            mock_agent_cls.return_value.run = slow_run
            service = PydanticAICompletionService(
                "test-model", request_timeout=0.01, max_retries=0
            )

            with pytest.raises(asyncio.TimeoutError):
                await service.complete("s", "u", max_output_tokens=100)
