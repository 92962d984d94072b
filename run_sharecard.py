import argparse
import asyncio
import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from sharecard.core import ShareCardPipeline
from sharecard.errors import CardSourceError, EncodeError


DEFAULT_API_BASE = "http://localhost:4321"
DEFAULT_QUALITY = 75


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Render a JPEG share card for a blog post."
    )
    parser.add_argument(
        "--slug",
        default="xin-chao",
        help="Slug of the blog post to render.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("thumbnail.jpg"),
        help="Where to write the JPEG.",
    )
    parser.add_argument(
        "--quality",
        type=int,
        default=os.environ.get("SHARECARD_QUALITY", str(DEFAULT_QUALITY)),
        help="JPEG quality, 1-100.",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=os.environ.get("SHARECARD_WORKERS"),
        help="Threads used to convert pixels (defaults to the CPU count).",
    )
    parser.add_argument(
        "--api-base",
        default=os.environ.get("SHARECARD_API_BASE", DEFAULT_API_BASE),
        help="Base URL of the blog API.",
    )
    parser.add_argument(
        "--font",
        default=os.environ.get("SHARECARD_FONT"),
        help="TrueType font for the title.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=10.0,
        help="Total time budget in seconds for fetching the post and thumbnail.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    # Load environment variables from a local .env file if present
    # (e.g. SHARECARD_API_BASE=https://blog.example.com).
    load_dotenv()

    args = parse_args(argv)

    pipeline = ShareCardPipeline(
        api_base=args.api_base,
        quality=args.quality,
        workers=args.workers,
        font_path=args.font,
        timeout=args.timeout,
    )

    try:
        with args.output.open("wb") as sink:
            asyncio.run(pipeline.run(args.slug, sink))
    except CardSourceError as exc:
        args.output.unlink(missing_ok=True)
        print(f"⚠️  Could not build the card: {exc}", file=sys.stderr)
        return 1
    except EncodeError as exc:
        # Whatever reached the file is not a valid image.
        args.output.unlink(missing_ok=True)
        print(f"⚠️  Could not encode the card: {exc}", file=sys.stderr)
        return 1

    print(f"Thumbnail generated successfully: {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
