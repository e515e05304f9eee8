"""
Media and style helpers.

Pure functions shared by the generation client and the creation form:
default style catalog, typography presets, data URL handling and the
blank start frame used for video generation.
"""
import base64
import io
import random
from typing import List, Optional, Tuple

from PIL import Image

DATA_URL_SEPARATOR = ";base64,"

# Default visual styles used when the user leaves the style empty
STYLE_CATALOG: List[str] = [
    "Text formed by soft volumetric clouds drifting across a golden sunset sky",
    "Letters erupting from roaring flames on a dark volcanic stage",
    "Mystic smoke swirling and slowly revealing the words in a moody studio",
    "A wall of crystal clear water punching through and shaping the text",
    "Neon lights flickering on wet asphalt in a cyberpunk alley at night",
    "Polished chrome letters on a minimalist marble pedestal with soft shadows",
    "Golden particles assembling the text in a luxurious black void",
    "Frozen ice sculptures of the letters cracking under cold blue light",
]

TYPOGRAPHY_SUGGESTIONS: List[dict] = [
    {
        "id": "luxury",
        "label": "Luxury",
        "prompt": "Refined luxury editorial serif, gold foil details, generous letter spacing.",
    },
    {
        "id": "bold",
        "label": "Bold",
        "prompt": "Heavy condensed sans-serif, high impact, all caps, tight tracking.",
    },
    {
        "id": "neon",
        "label": "Neon",
        "prompt": "Glowing neon tube lettering with soft bloom and reflections.",
    },
    {
        "id": "handwritten",
        "label": "Script",
        "prompt": "Elegant handwritten brush script with natural ink texture.",
    },
    {
        "id": "3d",
        "label": "3D",
        "prompt": "Extruded 3D letters with realistic materials and studio lighting.",
    },
    {
        "id": "minimal",
        "label": "Minimal",
        "prompt": "Thin geometric sans-serif, minimal and airy, clean whitespace.",
    },
]


def get_random_style(rng: Optional[random.Random] = None) -> str:
    """Pick a default visual style from the catalog."""
    return (rng or random).choice(STYLE_CATALOG)


def file_to_data_url(content: bytes, mime_type: str) -> str:
    """Encode uploaded file bytes as an embeddable data URL."""
    encoded = base64.b64encode(content).decode("utf-8")
    return f"data:{mime_type}{DATA_URL_SEPARATOR}{encoded}"


def clean_base64(data: str) -> str:
    """Strip a data URL prefix, leaving the raw base64 payload."""
    if DATA_URL_SEPARATOR in data:
        return data.split(DATA_URL_SEPARATOR, 1)[1]
    if data.startswith("data:") and "," in data:
        return data.split(",", 1)[1]
    return data


def split_data_url(data_url: str) -> Tuple[str, str]:
    """
    Split a data URL into (mime_type, base64 payload).

    Raises:
        ValueError: If the value is not a base64 data URL.
    """
    if not data_url.startswith("data:") or DATA_URL_SEPARATOR not in data_url:
        raise ValueError("Reference image must be a base64 data URL")
    header, payload = data_url.split(DATA_URL_SEPARATOR, 1)
    mime_type = header[len("data:"):] or "image/png"
    return mime_type, payload


def create_blank_image(width: int, height: int, color: str = "#000000") -> str:
    """Render a solid-color PNG and return its base64 payload."""
    image = Image.new("RGB", (width, height), color)
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return base64.b64encode(buffer.getvalue()).decode("utf-8")
