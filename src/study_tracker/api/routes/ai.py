"""AI assistant API endpoint.

Routes
------
- ``POST /ai/chat``  -- Chat, problem hint or personalized feedback
"""

from __future__ import annotations

import time
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, HTTPException
from google.genai import errors as genai_errors

from study_tracker.agents.assistant import StudyAssistant
from study_tracker.api.deps import get_assistant
from study_tracker.api.schemas import ChatRequest, ChatResponse

logger = structlog.get_logger()

router = APIRouter(tags=["ai"])

AssistantDep = Annotated[StudyAssistant, Depends(get_assistant)]


@router.post("/ai/chat")
async def chat(body: ChatRequest, assistant: AssistantDep) -> ChatResponse:
    """Dispatch on ``type``.

    - ``chat``: continue the conversation in ``messages``.
    - ``hint``: requires ``context.problem``; ``context.user_attempt``
      is optional.
    - ``feedback``: requires ``context.user_stats`` and
      ``context.current_topic``.

    Raises:
        HTTPException 400: Context required by ``type`` is missing.
        HTTPException 502: The LLM provider returned an error.
        HTTPException 503: No LLM provider is configured.
    """
    context = body.context
    try:
        if body.type == "hint":
            if context is None or not context.problem:
                raise HTTPException(
                    status_code=400, detail="Problem context required for hints"
                )
            message = await assistant.hint(context.problem, context.user_attempt)
        elif body.type == "feedback":
            if (
                context is None
                or context.user_stats is None
                or not context.current_topic
            ):
                raise HTTPException(
                    status_code=400,
                    detail="User stats and current topic required for feedback",
                )
            message = await assistant.feedback(
                context.user_stats, context.current_topic
            )
        else:
            message = await assistant.chat(body.messages)
    except genai_errors.APIError as exc:
        logger.error("assistant_provider_error", type=body.type, error=str(exc))
        raise HTTPException(
            status_code=502, detail="Failed to process AI request"
        ) from exc

    return ChatResponse(message=message, timestamp=int(time.time() * 1000))
