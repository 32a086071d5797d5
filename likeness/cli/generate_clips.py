#!/usr/bin/env python
"""
Generate Emotion Clips

This script generates short video clips of the person in an image expressing
an emotion and writes them as MP4 files.

Usage:
    likeness-generate-clips <image> <emotion> [--count N] [--intensity subtle|moderate|intense] [--output-dir DIR]
"""
import argparse
import asyncio
import mimetypes
import sys
import time
from pathlib import Path
from typing import List, Optional

from likeness.core.exceptions import ClipBatchFailedError, InvalidDataUriError
from likeness.core.logging import get_logger, setup_logging
from likeness.core.utils.data_uri import decode_data_uri, encode_data_uri
from likeness.domain.value_objects.generation import ClipResult
from likeness.infrastructure.gateway import GeminiModelGateway
from likeness.infrastructure.http import MediaDownloader
from likeness.services.clip_generation import ClipGenerationService
from likeness.services.consistency import ConsistencyValidator

logger = get_logger(__name__)


def read_image_as_data_uri(path: Path) -> str:
    """Read an image file and encode it as a data URI."""
    mime_type, _ = mimetypes.guess_type(path.name)
    if not mime_type or not mime_type.startswith("image/"):
        raise InvalidDataUriError(f"Not an image file: {path}")
    return encode_data_uri(path.read_bytes(), mime_type)


def write_clips(clips: List[ClipResult], output_dir: Path, emotion: str) -> List[Path]:
    """Write generated clips to ``<output_dir>/<emotion>_<n>.mp4``.

    Returns:
        Paths of the written files
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    paths = []
    for i, clip in enumerate(clips, 1):
        path = output_dir / f"{emotion.lower()}_{i}.mp4"
        path.write_bytes(decode_data_uri(clip.media_uri).data)
        paths.append(path)
    return paths


async def main(args: argparse.Namespace) -> int:
    """Main entry point."""
    source_image = read_image_as_data_uri(args.image)

    gateway = GeminiModelGateway()
    downloader = MediaDownloader()
    service = ClipGenerationService(
        gateway=gateway,
        downloader=downloader,
        validator=ConsistencyValidator(gateway),
    )

    start_time = time.time()
    try:
        clips = await service.generate_clips(
            source_image=source_image,
            target_emotion=args.emotion,
            count=args.count,
            intensity=args.intensity,
        )
    except ClipBatchFailedError as e:
        print(f"All {args.count} clip attempts failed: {e}", file=sys.stderr)
        return 1
    finally:
        await downloader.aclose()

    paths = write_clips(clips, args.output_dir, args.emotion)

    print("\n===== Clip Generation Stats =====")
    print(f"Emotion: {args.emotion}")
    print(f"Clips requested: {args.count}")
    print(f"Clips generated: {len(clips)}")
    print(f"Total time: {time.time() - start_time:.2f} seconds")
    for path in paths:
        print(f"  {path}")
    print("=================================")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate emotion clips from an actor image")
    parser.add_argument("image", type=Path, help="Path to a JPEG or PNG image of the actor")
    parser.add_argument("emotion", help="Emotion to synthesize, e.g. Happy")
    parser.add_argument("--count", type=int, default=1, help="Number of clips to attempt")
    parser.add_argument(
        "--intensity",
        choices=["subtle", "moderate", "intense"],
        help="Emotion intensity",
    )
    parser.add_argument("--output-dir", type=Path, default=Path("clips"), help="Directory for MP4 files")
    return parser


def run(argv: Optional[List[str]] = None) -> None:
    """Console script entry point."""
    setup_logging(stream=sys.stderr)
    args = build_parser().parse_args(argv)
    if args.count < 1:
        build_parser().error("--count must be at least 1")
    try:
        exit_code = asyncio.run(main(args))
    except InvalidDataUriError as e:
        print(f"Error: {e}", file=sys.stderr)
        exit_code = 2
    sys.exit(exit_code)


if __name__ == "__main__":
    run()
