"""
GestureLab - Hand and Voice Driven Object Manipulation

Entry point for the application.
"""
import argparse
import logging
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="GestureLab - Hand and Voice Object Manipulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Commands are read from stdin, one per line, e.g.\n"
            "  scale bigger\n"
            "  color red\n"
            "  rotate fast\n"
            '  {"action": "bounce"}'
        ),
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: config.yaml)",
    )

    parser.add_argument(
        "--asset",
        default="model.glb",
        help="Asset reference attached to every rendered transform",
    )

    parser.add_argument(
        "--no-voice",
        action="store_true",
        help="Ignore commands on stdin",
    )

    parser.add_argument(
        "--no-tracking",
        action="store_true",
        help="Do not open the camera (voice commands only)",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode with landmark overlay",
    )

    return parser.parse_args()


def format_transform(transform) -> str:
    px, py, pz = transform.position
    rx, ry, rz = transform.rotation
    return (
        f"pos=({px:+.2f}, {py:+.2f}, {pz:+.2f}) "
        f"rot=({rx:+.2f}, {ry:+.2f}, {rz:+.2f}) "
        f"scale={transform.scale:.2f} color={transform.color or '-'}"
    )


def start_command_source(engine, enabled):
    """Forward typed/piped commands to the engine."""
    from voice import CommandSource

    engine.set_voice_active(enabled)
    if not enabled:
        return None
    source = CommandSource(sys.stdin, engine.submit_command)
    source.start()
    return source


def run_webcam_debug(config, args):
    """
    Run webcam in debug mode - shows camera feed with landmarks,
    the current gesture and the rendered transform.
    """
    import time
    import cv2
    from fusion import FusionEngine, Gesture
    from webcam import HandTracker

    engine = FusionEngine(config)
    engine.load_object(args.asset)
    tracker = HandTracker(config)

    print("Starting webcam debug mode...")
    print("Press 'q' to quit, 'r' to recenter")
    print("-" * 40)

    if not tracker.start():
        print("ERROR: Could not open camera")
        return 1

    source = start_command_source(engine, not args.no_voice)

    try:
        while True:
            hand_frame = tracker.get_frame()
            if hand_frame is not None:
                engine.submit_frame(hand_frame)

            transform = engine.tick(time.perf_counter())
            reading = engine.last_reading

            frame = tracker.get_frame_with_landmarks(hand_frame)

            if frame is not None:
                gesture_text = f"Gesture: {reading.primary.kind.name}"
                cv2.putText(
                    frame, gesture_text, (10, 30),
                    cv2.FONT_HERSHEY_SIMPLEX, 1, (0, 255, 0), 2
                )

                info_lines = [
                    f"Hands: {reading.hand_count}",
                    f"Two-hand: {reading.two_hand.kind.name if reading.two_hand else '-'}",
                    format_transform(transform),
                ]
                for i, line in enumerate(info_lines):
                    cv2.putText(
                        frame, line, (10, 60 + i * 25),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 1
                    )

                # Print gesture events to console
                if reading.primary.kind in (Gesture.FIST, Gesture.PINCH, Gesture.POINTING_ROTATE):
                    print(f"[{tracker.frame_count:5d}] {reading.primary.kind.name}")

                cv2.imshow("GestureLab Debug", frame)

            key = cv2.waitKey(1) & 0xFF
            if key == ord('q'):
                break
            if key == ord('r'):
                engine.recenter()

    finally:
        if source is not None:
            source.stop()
        engine.set_voice_active(False)
        engine.set_tracking_active(False)
        tracker.stop()
        cv2.destroyAllWindows()

    return 0


def run_engine_mode(config, args):
    """Run the fusion engine in a worker thread and print rendered transforms."""
    import signal
    import atexit
    import time
    from PyQt5.QtCore import QCoreApplication, QThread, Qt
    from fusion import FusionEngine
    from webcam import WebcamWorker

    app = QCoreApplication(sys.argv)

    engine = FusionEngine(config)
    engine.load_object(args.asset)
    if args.no_tracking:
        engine.set_tracking_active(False)

    # Setup background worker and thread
    thread = QThread()
    worker = WebcamWorker(config, engine)
    worker.moveToThread(thread)

    source = start_command_source(engine, not args.no_voice)

    def cleanup():
        """Ensure camera is released on exit."""
        print("\nCleaning up camera resources...")
        if source is not None:
            source.stop()
        engine.set_voice_active(False)
        worker.stop_process()
        thread.quit()
        thread.wait(2000)
        print("Cleanup complete.")

    # Register cleanup for various exit scenarios
    atexit.register(cleanup)

    def signal_handler(signum, frame):
        """Handle Ctrl+C and kill signals gracefully."""
        print(f"\nReceived signal {signum}, shutting down...")
        app.quit()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    last_print = [0.0]  # Use list for mutability in closure

    def handle_transform(transform):
        """Stand-in renderer: print the transform at a readable rate."""
        now = time.perf_counter()
        if now - last_print[0] >= config.ui.print_interval:
            last_print[0] = now
            print(format_transform(transform))

    def handle_gesture(reading):
        if reading.two_hand is not None:
            logging.debug("Two-hand gesture: %s", reading.two_hand.kind.name)

    # Connect signals (QueuedConnection so handlers run in the main thread)
    thread.started.connect(worker.start_process)
    worker.transform_ready.connect(handle_transform, Qt.QueuedConnection)
    worker.gesture_detected.connect(handle_gesture, Qt.QueuedConnection)
    worker.hand_lost.connect(lambda: print("Hand lost"), Qt.QueuedConnection)
    worker.error.connect(lambda msg: print(f"WORKER ERROR: {msg}"), Qt.QueuedConnection)

    thread.start()

    try:
        result = app.exec_()
    finally:
        cleanup()
        atexit.unregister(cleanup)  # Avoid double cleanup

    return result


def main():
    """Main entry point."""
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from fusion import load_config
    config = load_config(args.config)

    # Apply CLI overrides
    if args.debug:
        config.ui.debug_overlay = True

    print(f"GestureLab starting...")
    print(f"  Asset: {args.asset}")
    print(f"  Tracking: {not args.no_tracking}")
    print(f"  Voice: {not args.no_voice}")
    print(f"  Debug: {args.debug}")
    print()

    if args.debug and not args.no_tracking:
        return run_webcam_debug(config, args)
    return run_engine_mode(config, args)


if __name__ == "__main__":
    sys.exit(main())
