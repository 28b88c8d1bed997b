"""LangGraph construction and node implementations.

One pass through ``stream_round`` is one continuation round: a single
provider call whose fragments are concatenated into ``text``. The
terminal marker is read only after the stream has ended.
"""

from __future__ import annotations

from langgraph.graph import END, StateGraph
from langgraph.graph.state import CompiledStateGraph

from chat_core.domain.models import ChatMessage, ChatRequest, CompletionMarker
from chat_core.flows.state import ContinuationState
from chat_core.infrastructure.logging.logger import logger
from chat_core.providers.base import ProviderClient
from chat_core.providers.stream import decode_stream


async def stream_round_node(state: ContinuationState, provider: ProviderClient) -> ContinuationState:
    round_num = state.get("rounds", 0) + 1
    messages = state["messages"]
    logger.info(
        "stream_round.start",
        extra={"extra": {"trace_id": state.get("trace_id"), "round": round_num, "message_count": len(messages)}},
    )
    req = ChatRequest(
        provider=provider.name,
        model=state["model"],
        messages=list(messages),
        temperature=state.get("temperature"),
    )
    pieces = []
    last = None
    async for fragment in decode_stream(provider.chat_stream(req)):
        pieces.append(fragment.text)
        last = fragment
    marker = last.terminal if last is not None else CompletionMarker.NONE
    text = "".join(pieces)
    logger.info(
        "stream_round.end",
        extra={"extra": {"trace_id": state.get("trace_id"), "round": round_num, "marker": marker.value, "chars": len(text)}},
    )
    return {"text": text, "marker": marker, "rounds": round_num}


async def append_node(state: ContinuationState) -> ContinuationState:
    message = ChatMessage(role="assistant", content=state.get("text", ""))
    return {"messages": [*state["messages"], message], "text": ""}


def round_router(state: ContinuationState) -> str:
    if state.get("marker") in (CompletionMarker.STOP, CompletionMarker.LENGTH):
        return "append"
    # filtered / none: the round's text is dropped
    return "end"


def append_router(state: ContinuationState) -> str:
    if state.get("marker") == CompletionMarker.LENGTH and state.get("rounds", 0) < state.get("max_rounds", 1):
        return "continue"
    return "end"


def recursion_limit_for(max_rounds: int) -> int:
    # two supersteps per round plus slack
    return 2 * max_rounds + 2


def build_graph(provider: ProviderClient) -> CompiledStateGraph:
    async def _stream_round(state: ContinuationState) -> ContinuationState:
        return await stream_round_node(state, provider)

    graph = StateGraph(ContinuationState)
    graph.add_node("stream_round", _stream_round)
    graph.add_node("append", append_node)
    graph.set_entry_point("stream_round")
    graph.add_conditional_edges("stream_round", round_router, {"append": "append", "end": END})
    graph.add_conditional_edges("append", append_router, {"continue": "stream_round", "end": END})
    return graph.compile()
