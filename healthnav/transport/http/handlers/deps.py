from __future__ import annotations

from fastapi import Request

from healthnav.service.pipeline_service import PipelineService


def get_pipeline(request: Request) -> PipelineService:
    # Use pre-initialized pipeline from app state when available
    pipeline = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        pipeline = PipelineService()
        request.app.state.pipeline = pipeline
    return pipeline
