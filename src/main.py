"""
Vehicle Lens: vehicle detection and color analysis for images and videos.

Usage:
    python src/main.py --image street.jpg
    python src/main.py --video clip.mp4 --continuous
    python src/main.py --serve

Arguments:
    --config: Path to configuration file
    --image: Analyze one still image
    --video: Analyze the first frame of a video (or the whole video with --continuous)
    --continuous: Run continuous detection until the video ends
    --serve: Run the HTTP control surface
"""

import argparse
import asyncio
import json
import logging
import sys

import uvicorn

from models.config import Config
from ops.config import load_config, validate_config
from ops.logging import setup_logging
from pipeline.controller import AnalysisController, create_controller_from_config
from web.app import create_app

# Poll interval while waiting for a continuous run to finish
CONTINUOUS_POLL_INTERVAL = 0.25


def print_snapshot(controller: AnalysisController) -> None:
    snapshot = controller.snapshot()
    print(json.dumps(snapshot.to_dict(), indent=2))
    for notice in controller.notices.active():
        print(f"[{notice.severity.value}] {notice.message}", file=sys.stderr)


async def analyze_media(controller: AnalysisController, path: str, continuous: bool = False) -> None:
    """Load one media item and run a single pass or the continuous loop."""
    controller.open_media(path)
    try:
        if not continuous:
            await controller.detect_once()
            return

        if not await controller.start_continuous():
            return
        while controller.continuous:
            await asyncio.sleep(CONTINUOUS_POLL_INTERVAL)
        await controller.scheduler.wait_idle()
        logging.info(f"Continuous run finished after {controller.scheduler.state.frame_counter} frames")
    finally:
        controller.release_media()


def main():
    """Main application function."""
    parser = argparse.ArgumentParser(description='Vehicle Lens - vehicle detection and color analysis')
    parser.add_argument('--config', type=str, default='config/config.yaml',
                        help='Path to configuration file')
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument('--image', type=str, help='Analyze a still image')
    mode.add_argument('--video', type=str, help='Analyze a video file')
    mode.add_argument('--serve', action='store_true', help='Run the HTTP control surface')
    parser.add_argument('--continuous', action='store_true',
                        help='With --video: detect on every frame until the video ends')
    args = parser.parse_args()

    config = load_config(args.config)

    is_valid, error_msg = validate_config(config)
    if not is_valid:
        logging.error(f"Configuration validation failed: {error_msg}")
        sys.exit(1)

    setup_logging(config['log_path'], config['log_level'])
    logging.info("Starting Vehicle Lens")

    controller = create_controller_from_config(config)

    if args.serve:
        web = Config.from_dict(config).web
        logging.info(f"Web interface starting on {web.host}:{web.port}")
        app = create_app(controller, cors_origins=web.cors_origins)
        uvicorn.run(app, host=web.host, port=web.port, log_level="info")
        return

    path = args.image or args.video
    try:
        asyncio.run(analyze_media(controller, path, continuous=bool(args.video and args.continuous)))
        print_snapshot(controller)
    except (FileNotFoundError, ValueError, RuntimeError) as e:
        logging.error(f"Failed to analyze {path}: {e}")
        sys.exit(1)
    finally:
        controller.unload()


if __name__ == "__main__":
    main()
