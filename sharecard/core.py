import asyncio
from typing import BinaryIO, Optional

import aiohttp
from PIL import Image

from .convert import unpremultiply_to_rgb
from .encode import encode_jpeg
from .fetch import BlogPost, fetch_blog_post, load_image
from .framebuffer import Framebuffer
from .render import CARD_SIZE, fit_to_card, render_card


class CompositingPipeline:
    """
    Turns a finished framebuffer into a JPEG written to a sink:
    - un-premultiply ARGB words into straight RGB bytes (in parallel)
    - encode them with optimized Huffman tables into the sink

    Holds no state between runs besides the worker count. Any `EncodeError`
    from either stage aborts the run and reaches the caller unchanged.
    """

    def __init__(self, workers: Optional[int] = None) -> None:
        self.workers = workers

    def run(self, framebuffer: Framebuffer, sink: BinaryIO, quality: int) -> int:
        rgb = unpremultiply_to_rgb(framebuffer, workers=self.workers)
        return encode_jpeg(rgb, framebuffer.width, framebuffer.height, quality, sink)


class ShareCardPipeline:
    """
    Orchestrates a share card for one blog post:
    - fetch the post and its thumbnail from the blog API
    - draw background, thumbnail, gradient wash and title
    - pack the drawing into a premultiplied framebuffer
    - run the compositing pipeline into the sink
    """

    def __init__(
        self,
        api_base: str,
        quality: int,
        workers: Optional[int] = None,
        font_path: Optional[str] = None,
        timeout: float = 10.0,
    ) -> None:
        self.api_base = api_base
        self.quality = quality
        self.font_path = font_path
        self.timeout = timeout
        self.compositor = CompositingPipeline(workers=workers)

    async def run(
        self,
        slug: str,
        sink: BinaryIO,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> int:
        if session is None:
            client_timeout = aiohttp.ClientTimeout(total=self.timeout)
            async with aiohttp.ClientSession(timeout=client_timeout) as owned:
                post, overlay = await self._fetch(owned, slug)
        else:
            post, overlay = await self._fetch(session, slug)

        print(f"Title: {post.title}")
        written = await asyncio.to_thread(self._compose, post, overlay, sink)
        print(f"✅ Done ({written} bytes)")
        return written

    def _compose(
        self,
        post: BlogPost,
        overlay: Optional[Image.Image],
        sink: BinaryIO,
    ) -> int:
        # Drawing and encoding are CPU-bound; run off the event loop.
        card = render_card(post.title, overlay=overlay, font_path=self.font_path)
        framebuffer = Framebuffer.from_image(card)

        print("🧮 Rendering")
        return self.compositor.run(framebuffer, sink, self.quality)

    async def _fetch(self, session: aiohttp.ClientSession, slug: str):
        post = await fetch_blog_post(session, self.api_base, slug)
        return post, await self._load_overlay(session, post)

    @staticmethod
    async def _load_overlay(
        session: aiohttp.ClientSession,
        post: BlogPost,
    ) -> Optional[Image.Image]:
        """
        A rendition is drawn at its native size; a bare thumbnail is
        stretched to fill the card.
        """
        if post.thumb is None:
            return None
        if post.thumb.rendition is not None:
            return await load_image(session, post.thumb.rendition.url)
        return fit_to_card(await load_image(session, post.thumb.url), CARD_SIZE)
