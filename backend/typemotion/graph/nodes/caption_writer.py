"""
CaptionWriter Node - Generates the promotional caption.
"""
from langchain_core.runnables import RunnableConfig

from typemotion.graph.state import GraphState
from typemotion.utils.logging import get_logger

logger = get_logger(__name__)


async def caption_writer_node(state: GraphState, config: RunnableConfig) -> GraphState:
    """
    Generate the caption used as the video legend and in sharing.

    Runs first so the caption only reflects the text and style, never
    the generated image. The client falls back to templates, so this
    node cannot fail.

    Updates:
    - caption
    """
    client = config["configurable"]["client"]
    request = state["request"]

    logger.info("CaptionWriter node started", text_preview=request.text[:50])

    caption = await client.generate_caption(
        request.text, state["style"], request.content_url
    )

    return {"caption": caption, "current_step": "caption_ready"}
