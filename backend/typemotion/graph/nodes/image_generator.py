"""
ImageGenerator Node - Renders the product text into a still image.
"""
from langchain_core.runnables import RunnableConfig

from typemotion.graph.state import GraphState
from typemotion.utils.logging import get_logger

logger = get_logger(__name__)


async def image_generator_node(state: GraphState, config: RunnableConfig) -> GraphState:
    """
    Generate the still image.

    Updates:
    - image: generated payload on success
    - error / failed_stage: on failure (terminal for the run)
    """
    client = config["configurable"]["client"]
    request = state["request"]

    logger.info("ImageGenerator node started", style=state["style"][:50])

    try:
        image = await client.generate_image(request, state["style"])
    except Exception as e:
        error_msg = str(e)
        logger.error("Image generation failed", error=error_msg)
        return {"error": error_msg, "failed_stage": "image", "current_step": "failed"}

    logger.info("Image generation completed", mime_type=image.mime_type)
    return {"image": image, "current_step": "image_ready"}


def should_continue_after_image(state: GraphState) -> str:
    """
    Conditional edge: the video needs the image as its last frame.

    Returns:
    - "video_generator" if the image was generated
    - "end" otherwise
    """
    if state.get("image") is not None and not state.get("error"):
        return "video_generator"
    return "end"
