"""Check orchestration — ties window, source, filter and notifier together."""

from src.pipeline.orchestrator import AlertPipeline, create_pipeline

__all__ = [
    "AlertPipeline",
    "create_pipeline",
]
