"""
Client for the hosted LLM gateway (OpenAI-compatible chat completions).

Two modes:
- structured: forces a named function call and returns its decoded
  arguments, falling back to the plain message text if the model did not
  call the function
- streaming chat: forwards the upstream event stream byte-for-byte

No retries happen here; callers decide whether to try again.
"""
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx

from api.core.config import get_settings
from api.core.errors import UpstreamError, UpstreamQuotaExhausted, UpstreamRateLimited

logger = logging.getLogger(__name__)


@dataclass
class GatewayResult:
    """Outcome of a structured invocation: decoded tool arguments or raw text."""
    data: Optional[Dict[str, Any]] = None
    content: Optional[str] = None
    model_name: str = ""
    execution_time_seconds: float = 0.0

    @property
    def is_structured(self) -> bool:
        return self.data is not None


def raise_for_gateway_status(status_code: int, body: str = "") -> None:
    """Map a non-2xx gateway status onto the error taxonomy."""
    if 200 <= status_code < 300:
        return
    if status_code == 429:
        raise UpstreamRateLimited()
    if status_code == 402:
        raise UpstreamQuotaExhausted()
    logger.error(f"AI gateway error: status={status_code} body={body[:800]}")
    raise UpstreamError("AI service error")


def build_tool_config(tool: Dict[str, Any]) -> Dict[str, Any]:
    """Request fields that force the model to call ``tool``."""
    return {
        "tools": [{"type": "function", "function": tool}],
        "tool_choice": {"type": "function", "function": {"name": tool["name"]}},
    }


def parse_completion(payload: Dict[str, Any]) -> GatewayResult:
    """Pull the function-call arguments (or fallback text) out of a completion."""
    choices = payload.get("choices") or []
    message = (choices[0] or {}).get("message") if choices else None
    if not message:
        logger.error(f"AI gateway returned no message: {str(payload)[:500]}")
        raise UpstreamError("AI service returned an empty response")

    tool_calls = message.get("tool_calls") or []
    if tool_calls:
        arguments = (tool_calls[0].get("function") or {}).get("arguments")
        if isinstance(arguments, dict):
            return GatewayResult(data=arguments)
        if arguments:
            try:
                data = json.loads(arguments)
            except json.JSONDecodeError as e:
                logger.error(f"Failed to parse tool arguments: {e}\nArguments: {arguments[:500]}")
                raise UpstreamError("AI service returned malformed output") from e
            if isinstance(data, dict):
                return GatewayResult(data=data)
            logger.error(f"Tool arguments were not an object: {arguments[:500]}")
            raise UpstreamError("AI service returned malformed output")

    content = message.get("content")
    if content:
        return GatewayResult(content=content)

    raise UpstreamError("AI service returned an empty response")


class AIGatewayClient:
    """Thin async wrapper around the gateway's /chat/completions endpoint."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.ai_gateway_api_key
        self.url = url or settings.ai_gateway_url
        self.model = model or settings.ai_model
        self.timeout = timeout or settings.ai_gateway_timeout_seconds
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        if not self.api_key:
            logger.error("AI gateway API key is not configured")
            raise UpstreamError("AI service is not configured")
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def invoke(
        self,
        system_prompt: str,
        user_prompt: str,
        tool: Optional[Dict[str, Any]] = None,
    ) -> GatewayResult:
        """
        Send one non-streamed completion request.

        Args:
            system_prompt: Persona/instructions for the model
            user_prompt: The task, including the document context
            tool: Function schema ({name, description, parameters}) the model
                must call; None for a plain text answer

        Returns:
            GatewayResult with ``data`` when the function was called,
            otherwise ``content`` with the model's text
        """
        headers = self._headers()
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        }
        if tool is not None:
            payload.update(build_tool_config(tool))

        start_time = time.time()
        try:
            async with self._client() as client:
                response = await client.post(self.url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"AI gateway request failed: {e!r}")
            raise UpstreamError("AI service error") from e

        raise_for_gateway_status(response.status_code, response.text)

        try:
            body = response.json()
        except ValueError as e:
            logger.error(f"AI gateway returned non-JSON body: {response.text[:500]}")
            raise UpstreamError("AI service error") from e

        result = parse_completion(body)
        result.model_name = self.model
        result.execution_time_seconds = round(time.time() - start_time, 3)
        logger.info(
            f"AI gateway call finished in {result.execution_time_seconds}s "
            f"(tool={tool['name'] if tool else None}, structured={result.is_structured})"
        )
        return result

    async def stream_chat(self, system_prompt: str, messages: List[Dict[str, str]]) -> "GatewayStream":
        """
        Start a streamed chat completion.

        The upstream status is checked before this returns, so rate-limit and
        quota errors surface as exceptions rather than as a broken stream.
        The returned iterator yields the raw event-stream bytes unchanged.
        """
        headers = self._headers()
        payload = {
            "model": self.model,
            "messages": [{"role": "system", "content": system_prompt}, *messages],
            "stream": True,
        }

        client = self._client()
        try:
            request = client.build_request("POST", self.url, json=payload, headers=headers)
            response = await client.send(request, stream=True)
        except httpx.HTTPError as e:
            await client.aclose()
            logger.error(f"AI gateway stream request failed: {e!r}")
            raise UpstreamError("AI service error") from e

        if not 200 <= response.status_code < 300:
            try:
                body = (await response.aread()).decode("utf-8", errors="replace")
            finally:
                await response.aclose()
                await client.aclose()
            raise_for_gateway_status(response.status_code, body)

        return GatewayStream(client, response)


class GatewayStream:
    """
    Raw upstream event stream that owns its HTTP client.

    Iterating forwards the bytes and closes the connection at the end;
    ``aclose()`` releases it even if iteration never started.
    """

    def __init__(self, client: httpx.AsyncClient, response: httpx.Response):
        self._client = client
        self._response = response
        self.closed = False

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self._forward()

    async def _forward(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self._response.aiter_raw():
                yield chunk
        except httpx.HTTPError as e:
            # The caller sees a truncated message; there is no retry.
            logger.warning(f"AI gateway stream ended early: {e!r}")
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        if self.closed:
            return
        self.closed = True
        try:
            await self._response.aclose()
        finally:
            await self._client.aclose()


_ai_gateway: Optional[AIGatewayClient] = None


def get_ai_gateway() -> AIGatewayClient:
    """Get or create the gateway client singleton."""
    global _ai_gateway
    if _ai_gateway is None:
        _ai_gateway = AIGatewayClient()
    return _ai_gateway
