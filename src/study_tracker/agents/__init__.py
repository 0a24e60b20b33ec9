"""LLM-backed agents."""

from study_tracker.agents.assistant import ChatMessage, StudyAssistant, create_assistant

__all__ = ["ChatMessage", "StudyAssistant", "create_assistant"]
