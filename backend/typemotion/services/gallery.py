"""
Landing page gallery (hero carousel) clips.
"""
from typing import List

from typemotion.schemas.session import GalleryVideo

STATIC_FILES_URL = "https://www.gstatic.com/aistudio/starter-apps/type-motion/"
ROTATION_SECONDS = 8.0

GALLERY_VIDEOS: List[GalleryVideo] = [
    GalleryVideo(
        id="1",
        title="Cloud Formations",
        video_url=STATIC_FILES_URL + "clouds_v2.mp4",
        description="Text formed by clouds.",
    ),
    GalleryVideo(
        id="2",
        title="Elemental Fire",
        video_url=STATIC_FILES_URL + "fire_v2.mp4",
        description="Flames erupt into text.",
    ),
    GalleryVideo(
        id="3",
        title="Mystic Smoke",
        video_url=STATIC_FILES_URL + "smoke_v2.mp4",
        description="Smoke reveals the text.",
    ),
    GalleryVideo(
        id="4",
        title="Water Blast",
        video_url=STATIC_FILES_URL + "water_v2.mp4",
        description="A wall of water punching through.",
    ),
]


def carousel_index(elapsed_seconds: float, count: int = len(GALLERY_VIDEOS)) -> int:
    """Index of the clip visible after `elapsed_seconds` of rotation."""
    if count <= 0:
        return 0
    return int(max(elapsed_seconds, 0) // ROTATION_SECONDS) % count
