"""Coaching chat pipeline."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol

from fitness_coach.domain.errors import UpstreamError, ValidationError
from fitness_coach.domain.models import ChatMessage
from fitness_coach.services.coach_tools import CoachTool, CoachToolFactory

CHAT_SYSTEM_PROMPT = (
    'You are "AI Fitness Coach", a friendly bilingual assistant that understands '
    "Korean and English.\n"
    "- Use tools when the user asks for existing plans, reservations, progress, "
    "or exercise videos.\n"
    "- Provide concise, actionable advice with safety reminders when needed.\n"
    "- When sharing YouTube links, format them as bullet lists with the video "
    "title and URL.\n"
    "- Keep a motivating, professional tone."
)

_HISTORY_ROLES = {"user", "assistant", "model"}


class ToolCallingChatClient(Protocol):
    """Interface for an LLM that can call tools before answering."""

    async def run_with_tools(  # noqa: PLR0913
        self,
        *,
        model: str,
        temperature: float | None,
        max_output_tokens: int | None,
        messages: list[dict[str, str]],
        tools: Sequence[CoachTool],
    ) -> str:
        """Run the conversation until the model answers and return its text."""


@dataclass
class ChatReply:
    """Reply text plus the normalized transcript."""

    reply: str
    messages: list[ChatMessage]


@dataclass
class ChatService:
    """Answers member messages with member-scoped tools."""

    client: ToolCallingChatClient
    tool_factory: CoachToolFactory
    model: str
    temperature: float | None = 0.6
    max_output_tokens: int | None = 2048

    async def reply(
        self,
        member_id: str | None,
        message: str | None,
        history: Sequence[object] | None = None,
    ) -> ChatReply:
        """Answer a message given prior history, oldest first."""
        text = message.strip() if isinstance(message, str) else ""
        if not text:
            raise ValidationError("message is required", fields=["message"])

        transcript = normalize_history(history)
        transcript.append(ChatMessage(role="user", content=text))
        request_messages = [{"role": "system", "content": CHAT_SYSTEM_PROMPT}]
        request_messages.extend(
            {"role": _provider_role(item.role), "content": item.content}
            for item in transcript
        )
        tools = self.tool_factory.build(member_id or None)
        try:
            reply = await self.client.run_with_tools(
                model=self.model,
                temperature=self.temperature,
                max_output_tokens=self.max_output_tokens,
                messages=request_messages,
                tools=tools,
            )
        except Exception as exc:
            raise UpstreamError(f"Coach chat failed: {exc}") from exc
        transcript.append(ChatMessage(role="assistant", content=reply))
        return ChatReply(reply=reply, messages=transcript)


def normalize_history(history: Sequence[object] | None) -> list[ChatMessage]:
    """Keep well-formed user and assistant turns, dropping everything else."""
    if not history:
        return []
    normalized: list[ChatMessage] = []
    for item in history:
        if not isinstance(item, Mapping):
            continue
        role = item.get("role")
        content = item.get("content", item.get("text"))
        if role in _HISTORY_ROLES and isinstance(content, str):
            normalized.append(ChatMessage(role=role, content=content))
    return normalized


def _provider_role(role: str) -> str:
    return "assistant" if role == "model" else role
