"""LangGraph nodes for the generation pipeline."""
from typemotion.graph.nodes.caption_writer import caption_writer_node
from typemotion.graph.nodes.image_generator import image_generator_node
from typemotion.graph.nodes.video_generator import video_generator_node

__all__ = [
    "caption_writer_node",
    "image_generator_node",
    "video_generator_node",
]
