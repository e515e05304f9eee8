"""LangGraph pipeline for ad generation."""
from typemotion.graph.pipeline import generation_pipeline, stream_pipeline
from typemotion.graph.state import GraphState

__all__ = ["generation_pipeline", "stream_pipeline", "GraphState"]
