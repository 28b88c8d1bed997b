"""State definition for the continuation graph."""

from __future__ import annotations

from typing import List, Optional, TypedDict

from chat_core.domain.models import ChatMessage, CompletionMarker


class ContinuationState(TypedDict, total=False):
    """State shared across LangGraph nodes.

    ``messages`` is the private working buffer of one invocation; nodes
    never mutate it in place, they return a new list.
    """

    messages: List[ChatMessage]
    model: str
    temperature: Optional[float]
    text: str
    marker: CompletionMarker
    rounds: int
    max_rounds: int
    trace_id: str
