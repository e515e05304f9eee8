"""
LangGraph pipeline assembly.
Defines the caption -> image -> video workflow graph.
"""
from typing import Any, AsyncIterator, Dict, Tuple

from langgraph.graph import END, StateGraph

from typemotion.graph.nodes.caption_writer import caption_writer_node
from typemotion.graph.nodes.image_generator import (
    image_generator_node,
    should_continue_after_image,
)
from typemotion.graph.nodes.video_generator import video_generator_node
from typemotion.graph.state import GraphState
from typemotion.models import GenerationRequest
from typemotion.utils.logging import get_logger

logger = get_logger(__name__)


def create_pipeline() -> StateGraph:
    """
    Create and return the generation pipeline.

    Flow:
    1. CaptionWriter -> ImageGenerator (caption never fails)

    2. ImageGenerator -> (has image) -> VideoGenerator
                      -> (error) -> END

    3. VideoGenerator -> END
    """
    workflow = StateGraph(GraphState)

    workflow.add_node("caption_writer", caption_writer_node)
    workflow.add_node("image_generator", image_generator_node)
    workflow.add_node("video_generator", video_generator_node)

    workflow.set_entry_point("caption_writer")

    workflow.add_edge("caption_writer", "image_generator")

    workflow.add_conditional_edges(
        "image_generator",
        should_continue_after_image,
        {"video_generator": "video_generator", "end": END},
    )

    workflow.add_edge("video_generator", END)

    return workflow


# Compile the graph for execution
generation_pipeline = create_pipeline().compile()


async def stream_pipeline(
    client: Any,
    request: GenerationRequest,
    style: str,
) -> AsyncIterator[Tuple[str, Dict[str, Any]]]:
    """
    Execute the pipeline and yield (node_name, update) as each node finishes.

    Args:
        client: GenerationClient used by the nodes
        request: Submitted generation request
        style: Resolved visual style
    """
    logger.info("Starting pipeline", text_preview=request.text[:50], style=style[:50])

    initial_state: GraphState = {
        "request": request,
        "style": style,
        "caption": None,
        "image": None,
        "video_url": None,
        "error": None,
        "failed_stage": None,
        "current_step": "initializing",
    }

    async for chunk in generation_pipeline.astream(
        initial_state,
        config={"configurable": {"client": client}},
        stream_mode="updates",
    ):
        for node_name, update in chunk.items():
            yield node_name, update or {}

    logger.info("Pipeline finished")
