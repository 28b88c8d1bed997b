"""续写循环的 LangGraph 实现。"""

from chat_core.flows.graph import build_graph, recursion_limit_for
from chat_core.flows.state import ContinuationState

__all__ = ["ContinuationState", "build_graph", "recursion_limit_for"]
