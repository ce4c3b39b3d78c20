"""OpenAI Responses API client for plan generation and coach chat."""

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from openai import AsyncOpenAI

from fitness_coach.services.chat import ToolCallingChatClient
from fitness_coach.services.coach_tools import CoachTool, dispatch_tool_call
from fitness_coach.services.plans import StructuredCompletionClient

_logger = logging.getLogger(__name__)


@dataclass
class OpenAICoachClient(StructuredCompletionClient, ToolCallingChatClient):
    """Coach client backed by OpenAI Responses API."""

    client: AsyncOpenAI
    reasoning_effort: str | None = None
    store: bool = False

    @classmethod
    def create(
        cls,
        api_key: str,
        *,
        timeout_seconds: float = 60,
        reasoning_effort: str | None = None,
        store: bool = False,
    ) -> "OpenAICoachClient":
        """Create an OpenAI coach client."""
        return cls(
            client=AsyncOpenAI(api_key=api_key, timeout=timeout_seconds),
            reasoning_effort=reasoning_effort,
            store=store,
        )

    async def generate_structured(  # noqa: PLR0913
        self,
        *,
        model: str,
        temperature: float | None,
        max_output_tokens: int | None,
        system_prompt: str,
        user_prompt: str,
        schema_name: str,
        schema: dict[str, object],
    ) -> dict[str, object]:
        """Call OpenAI Responses API with structured outputs."""
        request_payload = self._base_payload(model, temperature, max_output_tokens)
        request_payload["input"] = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]
        request_payload["text"] = {
            "format": {
                "type": "json_schema",
                "name": schema_name,
                "strict": True,
                "schema": schema,
            }
        }
        response = await self.client.responses.create(**request_payload)
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return json.loads(output_text)

    async def run_with_tools(  # noqa: PLR0913
        self,
        *,
        model: str,
        temperature: float | None,
        max_output_tokens: int | None,
        messages: list[dict[str, str]],
        tools: Sequence[CoachTool],
    ) -> str:
        """Let the model call tools until it produces a final message."""
        input_items: list[object] = list(messages)
        tool_specs = [
            {
                "type": "function",
                "name": tool.name,
                "description": tool.description,
                "parameters": tool.parameters,
                "strict": False,
            }
            for tool in tools
        ]
        while True:
            request_payload = self._base_payload(model, temperature, max_output_tokens)
            request_payload["input"] = input_items
            if tool_specs:
                request_payload["tools"] = tool_specs
            response = await self.client.responses.create(**request_payload)
            calls = [
                item
                for item in response.output
                if getattr(item, "type", None) == "function_call"
            ]
            if not calls:
                reply = _flatten_output_text(response.output)
                if not reply:
                    raise RuntimeError("OpenAI returned an empty response")
                return reply

            input_items.extend(response.output)
            for call in calls:
                _logger.info("Coach tool call: name=%s", call.name)
                output = await dispatch_tool_call(tools, call.name, call.arguments)
                input_items.append(
                    {
                        "type": "function_call_output",
                        "call_id": call.call_id,
                        "output": output,
                    }
                )

    def _base_payload(
        self, model: str, temperature: float | None, max_output_tokens: int | None
    ) -> dict[str, object]:
        payload: dict[str, object] = {"model": model, "store": self.store}
        if max_output_tokens is not None:
            payload["max_output_tokens"] = max_output_tokens
        if self.reasoning_effort:
            # Reasoning models reject temperature.
            payload["reasoning"] = {"effort": self.reasoning_effort}
            if not self.store:
                # Unstored reasoning items can only be replayed in encrypted form.
                payload["include"] = ["reasoning.encrypted_content"]
        elif temperature is not None:
            payload["temperature"] = temperature
        return payload


def _flatten_output_text(output: Sequence[object]) -> str:
    """Join the text parts of every output message with newlines."""
    parts: list[str] = []
    for item in output:
        if getattr(item, "type", None) != "message":
            continue
        for content in getattr(item, "content", None) or []:
            text = getattr(content, "text", None)
            if getattr(content, "type", None) == "output_text" and text:
                parts.append(text)
    return "\n".join(parts).strip()
