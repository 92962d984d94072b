import asyncio
import io
from dataclasses import dataclass
from typing import Any, Dict, Optional

import aiohttp
from PIL import Image, UnidentifiedImageError

from .errors import CardSourceError


@dataclass
class Rendition:
    url: str


@dataclass
class Thumbnail:
    url: str
    rendition: Optional[Rendition] = None


@dataclass
class BlogPost:
    title: str
    thumb: Optional[Thumbnail] = None

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "BlogPost":
        """
        Build a post from the blog API payload, ignoring unknown fields.
        """
        if not isinstance(data, dict) or not isinstance(data.get("title"), str):
            raise CardSourceError("Blog post payload has no title")

        thumb = None
        raw_thumb = data.get("thumb")
        if isinstance(raw_thumb, dict) and raw_thumb.get("url"):
            rendition = None
            raw_rendition = raw_thumb.get("rendition")
            if isinstance(raw_rendition, dict) and raw_rendition.get("url"):
                rendition = Rendition(url=str(raw_rendition["url"]))
            thumb = Thumbnail(url=str(raw_thumb["url"]), rendition=rendition)

        return cls(title=data["title"], thumb=thumb)


async def fetch_blog_post(
    session: aiohttp.ClientSession,
    api_base: str,
    slug: str,
) -> BlogPost:
    url = f"{api_base.rstrip('/')}/api/blog"
    print(f"📰 Fetching blog post '{slug}'")
    try:
        async with session.get(url, params={"slug": slug}) as response:
            response.raise_for_status()
            payload = await response.json(content_type=None)
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
        raise CardSourceError(f"Failed to parse blog post: {exc}", url=url) from exc

    return BlogPost.from_mapping(payload)


async def load_image(session: aiohttp.ClientSession, url: str) -> Image.Image:
    """
    Download an image and decode it with Pillow.

    The image is loaded eagerly so truncated or corrupt downloads fail here
    rather than later, in the middle of drawing.
    """
    print(f"🖼️  Loading texture {url}")
    try:
        async with session.get(url) as response:
            response.raise_for_status()
            body = await response.read()
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        raise CardSourceError(f"Failed to download image bytes: {exc}", url=url) from exc

    try:
        img = Image.open(io.BytesIO(body))
        img.load()
    except (UnidentifiedImageError, OSError) as exc:
        raise CardSourceError(f"Failed to load image from memory: {exc}", url=url) from exc
    return img
