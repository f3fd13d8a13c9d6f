"""Permissive schema for one line of a Claude Code session log.

Only ``type`` and ``timestamp`` are required. Unknown top-level fields are
ignored and unknown content block types validate as :class:`UnknownBlock`
rather than failing the whole line.
"""
from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Tag, field_validator

from total_recall.date_utils import ensure_utc

_KNOWN_BLOCK_TYPES = {"text", "tool_use", "tool_result", "thinking"}


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="ignore")


class TextBlock(_Lenient):
    type: Literal["text"] = "text"
    text: str = ""


class ToolUseBlock(_Lenient):
    type: Literal["tool_use"] = "tool_use"
    id: str = ""
    name: str = ""
    input: Any = None


class ToolResultBlock(_Lenient):
    type: Literal["tool_result"] = "tool_result"
    tool_use_id: str = ""
    content: Any = None
    is_error: bool = False


class ThinkingBlock(_Lenient):
    type: Literal["thinking"] = "thinking"
    thinking: str = ""


class UnknownBlock(_Lenient):
    type: str = "unknown"


def _block_tag(value: Any) -> str:
    if isinstance(value, dict):
        block_type = value.get("type")
    else:
        block_type = getattr(value, "type", None)
    return block_type if block_type in _KNOWN_BLOCK_TYPES else "unknown"


ContentBlock = Annotated[
    Union[
        Annotated[TextBlock, Tag("text")],
        Annotated[ToolUseBlock, Tag("tool_use")],
        Annotated[ToolResultBlock, Tag("tool_result")],
        Annotated[ThinkingBlock, Tag("thinking")],
        Annotated[UnknownBlock, Tag("unknown")],
    ],
    Discriminator(_block_tag),
]


class MessagePayload(_Lenient):
    role: str = ""
    content: Union[str, list[ContentBlock], None] = None
    model: Optional[str] = None

    def text(self) -> str:
        """Plain string content, or the first text block."""
        if isinstance(self.content, str):
            return self.content
        for block in self.content or []:
            if isinstance(block, TextBlock):
                return block.text
        return ""


class LogEntry(_Lenient):
    type: str
    timestamp: datetime
    uuid: Optional[str] = None
    parentUuid: Optional[str] = None
    sessionId: Optional[str] = None
    cwd: Optional[str] = None
    slug: Optional[str] = None
    gitBranch: Optional[str] = None
    isSidechain: bool = False
    agentId: Optional[str] = None
    version: Optional[str] = None
    message: Optional[MessagePayload] = None

    @field_validator("timestamp", mode="before")
    @classmethod
    def _require_datetime_string(cls, value: Any) -> Any:
        # RFC 3339 only: no epoch numbers, no date-only strings.
        if not isinstance(value, str) or len(value) < 11 or value[10] not in "Tt ":
            raise ValueError("timestamp must be an RFC 3339 date-time string")
        return value

    @field_validator("timestamp")
    @classmethod
    def _normalize_timestamp(cls, value: datetime) -> datetime:
        try:
            return ensure_utc(value)
        except OverflowError as exc:
            raise ValueError(f"timestamp out of range: {exc}") from exc

    @field_validator("isSidechain", mode="before")
    @classmethod
    def _null_sidechain(cls, value: Any) -> Any:
        return False if value is None else value

    def is_user_authored(self) -> bool:
        if self.type != "user":
            return False
        return self.message is None or self.message.role in ("", "user")
