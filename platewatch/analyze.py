"""
One-shot image analysis from the command line.

    python -m platewatch.analyze --image scene.jpg --watchlist plates.txt

By default results go to the same storage file as the server; pass
--no-persist to keep the logs in memory only.
"""

import asyncio
import mimetypes
from pathlib import Path

from platewatch.config import PlateWatchConfig
from platewatch.errors import PlateWatchError
from platewatch.plates.normalize import has_violation
from platewatch.schemas import ImageUpload
from platewatch.session import SessionManager
from platewatch.storage import JsonFileStore, MemoryStore
from platewatch.vision.inference_client import InferenceClient


def load_image(path: str) -> ImageUpload:
    """Read an image file, guessing its MIME type from the extension"""
    image_path = Path(path)
    mime_type, _ = mimetypes.guess_type(image_path.name)
    return ImageUpload(
        content=image_path.read_bytes(),
        mime_type=mime_type or "",
        filename=image_path.name,
    )


async def run_analysis(manager: SessionManager, image: ImageUpload, watchlist_text: str) -> int:
    """Process one image and print the results. Returns the exit code."""
    manager.select_image(image)
    outcome = await manager.process_image(watchlist_text)

    if not outcome.success:
        print(f"❌ {outcome.error}")
        return 1

    if outcome.plates:
        print(f"Detected License Plates: {', '.join(outcome.plates)}")
    else:
        print("Detected License Plates: none")

    if has_violation(outcome.violation):
        print("Observed Traffic Violations:")
        print(outcome.violation)
    else:
        print("Observed Traffic Violations: none")

    if outcome.new_alerts:
        print(f"🚨 Watchlist match: {', '.join(outcome.new_alerts)}")

    if outcome.record:
        print(f"Saved detection record {outcome.record.id}")

    return 0


def main():
    """Command-line interface"""
    import argparse

    parser = argparse.ArgumentParser(description="Analyze a traffic scene image")
    parser.add_argument("--image", required=True, help="Path to traffic image")
    parser.add_argument("--watchlist", help="Text file with one watchlist plate per line")
    parser.add_argument("--no-persist", action="store_true", help="Do not write the detection logs")

    args = parser.parse_args()

    config = PlateWatchConfig.from_env()

    try:
        image = load_image(args.image)
    except (OSError, PlateWatchError) as e:
        print(f"❌ Failed to load image: {args.image} ({e})")
        raise SystemExit(1)

    watchlist_text = ""
    if args.watchlist:
        watchlist_text = Path(args.watchlist).read_text()

    storage = MemoryStore() if args.no_persist else JsonFileStore(config.storage_file)
    manager = SessionManager(storage=storage, client=InferenceClient(config))

    raise SystemExit(asyncio.run(run_analysis(manager, image, watchlist_text)))


if __name__ == "__main__":
    main()
