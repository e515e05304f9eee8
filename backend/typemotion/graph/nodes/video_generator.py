"""
VideoGenerator Node - Animates the image into the final clip.
"""
from langchain_core.runnables import RunnableConfig

from typemotion.graph.state import GraphState
from typemotion.utils.logging import get_logger

logger = get_logger(__name__)


async def video_generator_node(state: GraphState, config: RunnableConfig) -> GraphState:
    """
    Generate the video, waiting on the long-running job.

    Updates:
    - video_url: public URL of the stored clip on success
    - error / failed_stage: on failure (terminal for the run)
    """
    client = config["configurable"]["client"]
    request = state["request"]

    logger.info("VideoGenerator node started", text_preview=request.text[:50])

    try:
        video_url = await client.generate_video(
            request.text, state["image"], state["style"], state.get("caption") or ""
        )
    except Exception as e:
        error_msg = str(e)
        logger.error("Video generation failed", error=error_msg)
        return {"error": error_msg, "failed_stage": "video", "current_step": "failed"}

    logger.info("Video generation completed", video_url=video_url)
    return {"video_url": video_url, "current_step": "completed"}
