"""LLM boundary: LangChain feedback content generator."""

from docfeedback.boundary.llm.feedback_llm import LangChainFeedbackGenerator, create_chat_model

__all__ = ["LangChainFeedbackGenerator", "create_chat_model"]
