"""Common FastAPI dependencies reused across controllers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from app.pipelines.answer import AnswerPipeline


def get_answer_pipeline(request: Request) -> AnswerPipeline:
    """Return the pipeline built during application startup."""

    pipeline = getattr(request.app.state, "answer_pipeline", None)
    if pipeline is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Answer pipeline is not initialised",
        )
    return pipeline


AnswerPipelineDep = Annotated[AnswerPipeline, Depends(get_answer_pipeline)]


__all__ = ["get_answer_pipeline", "AnswerPipelineDep"]
