"""流式解码。

把 Provider 的 ChatStreamChunk 序列转成 StreamFragment 序列：
每个非空文本增量对应一个片段（terminal 为 NONE），流结束后再补一个
空文本片段，携带整条流中最后出现的 finish_reason。

这样“带终止标记”与“最后一个片段”总是一致的，即便 Provider 在
finish_reason 之后还会发送只含 usage 的事件。
"""

from typing import AsyncIterable, AsyncIterator, Dict, Optional

from chat_core.domain.models import ChatStreamChunk, CompletionMarker, StreamFragment


FINISH_REASON_MARKERS: Dict[str, CompletionMarker] = {
    "stop": CompletionMarker.STOP,
    "length": CompletionMarker.LENGTH,
    "content_filter": CompletionMarker.FILTERED,
    "filtered_content": CompletionMarker.FILTERED,
}


def to_marker(finish_reason: Optional[str]) -> CompletionMarker:
    if finish_reason is None:
        return CompletionMarker.NONE
    return FINISH_REASON_MARKERS.get(finish_reason, CompletionMarker.NONE)


async def decode_stream(chunks: AsyncIterable[ChatStreamChunk]) -> AsyncIterator[StreamFragment]:
    finish_reason: Optional[str] = None
    async for chunk in chunks:
        if not chunk.choices:
            continue
        choice = chunk.choices[0]
        if choice.finish_reason is not None:
            finish_reason = choice.finish_reason
        text = choice.delta.content or ""
        if text:
            yield StreamFragment(text=text)
    yield StreamFragment(text="", terminal=to_marker(finish_reason))
