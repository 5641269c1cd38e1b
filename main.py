"""
Command-line entry point.
Loads a G-code file, reports validation errors and the toolpath summary, and
optionally plays the toolpath back in real time on a Qt event loop.
"""

import argparse
import logging
import sys

from PySide6.QtCore import QCoreApplication

from config.playback_config import ConfigManager
from gcode_processor import GCodeProcessor
from gui.playback_timer import PlaybackTimer


def print_frame(frame):
    x, y, z = frame.position.to_list()
    print(f"t={frame.time:8.3f}s  seg={frame.segment_index:<4d} "
          f"X{x:.3f} Y{y:.3f} Z{z:.3f}")


def main(argv=None):
    """Parses a file and, with --play, runs playback until it finishes."""
    parser = argparse.ArgumentParser(description="G-code toolpath preview")
    parser.add_argument("gcode", type=str, help="G-code file path")
    parser.add_argument("--config", type=str, default="default",
                        help="Playback preset name or path to a JSON config")
    parser.add_argument("--speed", type=float, default=None,
                        help="Playback speed in units/min (default: calibrated)")
    parser.add_argument("--play", action="store_true", help="Play the toolpath back")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.speed is not None and not args.speed > 0:
        parser.error(f"--speed must be positive, got {args.speed}")

    if args.config.endswith(".json"):
        config = ConfigManager.load_config(args.config)
    else:
        config = ConfigManager.get_config(args.config)

    try:
        with open(args.gcode, 'r', encoding='utf-8') as f:
            content = f.read()
    except OSError as e:
        print(f"Could not read {args.gcode}: {e}", file=sys.stderr)
        return 1

    processor = GCodeProcessor(config)
    if not processor.set_content(content):
        print("Validation errors:", file=sys.stderr)
        for error in processor.get_validation_errors():
            print(f"  {error}", file=sys.stderr)
        return 1

    if processor.parse_content() is None:
        print("Nothing to process.", file=sys.stderr)
        return 1

    summary = processor.get_toolpath_summary()
    print(f"Segments: {summary['total_segments']} "
          f"({summary['extruding_segments']} extruding)")
    print(f"Extrude length: {summary['extrude_length']:.2f}")
    print(f"Travel length: {summary['travel_length']:.2f}")
    print(f"Bounding box: {summary['bounding_box']['size']}")
    print(f"Playback speed: {summary['speed']:.0f} units/min")

    if not args.play:
        return 0

    if args.speed is not None:
        processor.set_speed(args.speed)

    app = QCoreApplication(sys.argv[:1])
    playback = PlaybackTimer(processor.create_playback())
    playback.frameChanged.connect(print_frame)
    playback.finished.connect(app.quit)
    playback.play()
    if playback.controller.is_playing():
        app.exec()
    return 0


if __name__ == '__main__':
    sys.exit(main())
