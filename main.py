"""
CT Batch Capture

Main entry point for the application.

Without arguments the GUI starts. With --batch-output the given series are
captured headlessly and written as PNG files, then the process exits.
"""

import argparse
import os
import sys
import logging
from typing import List, Optional, Sequence, Tuple

from config import DEFAULT_CAPTURE


def setup_logging(level: int = logging.INFO):
    """Configure logging to stdout."""
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def parse_size(text: str) -> Tuple[int, int]:
    """Parse 'WIDTHxHEIGHT'."""
    try:
        width, height = (int(v) for v in text.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected WIDTHxHEIGHT, got '{text}'")
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError(f"Size must be positive, got '{text}'")
    return width, height


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Batch capture of 2D / MPR views from CT series."
    )
    source = parser.add_argument_group("data")
    source.add_argument("--dicom", metavar="DIR", help="Load DICOM series from a directory")
    source.add_argument("--phantom", action="store_true", help="Load a synthetic phantom")

    batch = parser.add_argument_group("headless batch")
    batch.add_argument(
        "--batch-output", metavar="DIR",
        help="Capture every loaded series without the GUI and write PNGs here"
    )
    batch.add_argument("--mode", choices=["slice2D", "mpr"], default="slice2D")
    batch.add_argument(
        "--count", type=int, default=DEFAULT_CAPTURE.default_sampling_count,
        help="Maximum views per series"
    )
    batch.add_argument(
        "--center-bias", type=float, default=None, metavar="EXP",
        help="Center-biased sampling exponent (uniform if omitted)"
    )
    batch.add_argument("--orientation", choices=["axial", "coronal", "sagittal"], default="axial")
    batch.add_argument("--slab", choices=["none", "mip", "minip", "average"], default="none")
    batch.add_argument("--slab-thickness", type=float, default=0.0, metavar="MM")
    batch.add_argument(
        "--size", type=parse_size, default=DEFAULT_CAPTURE.output_size, metavar="WxH",
        help="Output image size"
    )
    batch.add_argument(
        "--timeout", type=float, default=DEFAULT_CAPTURE.frame_timeout_s, metavar="S",
        help="Per-frame deadline in seconds"
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def load_volumes(args) -> list:
    """Series requested on the command line."""
    from loaders import DICOMSeriesLoader, generate_phantom

    volumes = []
    if args.dicom:
        volumes.extend(DICOMSeriesLoader().load(args.dicom))
    if args.phantom:
        volumes.append(generate_phantom())
    return volumes


def build_requests(args, series_ids: Sequence[str]) -> list:
    """One capture request per series, from the command line options."""
    from capture import CaptureRequest, CenterBiasedSampling, OrientationIntent, SlabType

    strategy = CenterBiasedSampling(args.center_bias) if args.center_bias is not None else None
    requests = []
    for series_id in series_ids:
        if args.mode == "mpr":
            requests.append(CaptureRequest.mpr(
                series_id,
                args.count,
                sampling_strategy=strategy,
                orientation_intent=OrientationIntent[args.orientation.upper()],
                slab_type=SlabType[args.slab.upper()],
                slab_thickness_mm=args.slab_thickness,
            ))
        else:
            requests.append(CaptureRequest.slice_2d(series_id, args.count, sampling_strategy=strategy))
    return requests


def run_headless(args) -> int:
    """Capture all loaded series offscreen and write them to disk."""
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

    from PySide6.QtGui import QGuiApplication
    from capture import BatchCaptureManager
    from exporters import ImageExporter
    from visualization import ViewerController

    app = QGuiApplication.instance() or QGuiApplication(sys.argv)

    volumes = load_volumes(args)
    if not volumes:
        logging.error("Nothing to capture: pass --dicom DIR and/or --phantom")
        return 2

    viewer = ViewerController()
    for volume in volumes:
        viewer.load_series(volume)

    requests = build_requests(args, viewer.data_cache.series_ids)
    exporter = ImageExporter(args.batch_output)
    written: List[str] = []
    errors: List[str] = []

    def on_frame(result) -> None:
        if not result.has_image:
            return
        try:
            written.append(str(exporter.save(result.image, result.index)))
        except (OSError, ValueError) as e:
            logging.error(f"Could not save frame {result.index}: {e}")
            errors.append(str(e))

    manager = BatchCaptureManager(frame_timeout_s=args.timeout)
    manager.engine.frame_captured.connect(on_frame)
    manager.batch_complete.connect(app.quit)

    num_states = manager.execute_batch(requests, viewer, args.size)
    if num_states and manager.is_running:
        app.exec()

    logging.info(f"Wrote {len(written)} image(s) to {args.batch_output}")
    return 1 if errors else 0


def run_gui(args) -> int:
    """Application entry point for the GUI."""
    from PySide6.QtWidgets import QApplication
    from PySide6.QtCore import Qt
    from PySide6.QtGui import QFont

    from config import DEFAULT_GUI
    from gui.main_window import MainWindow
    from gui.style import ScientificStyle

    # Enable High DPI scaling
    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    app = QApplication(sys.argv)
    app.setApplicationName(DEFAULT_GUI.window_title)
    app.setApplicationVersion("1.0")
    app.setOrganizationName("Research")

    app.setFont(QFont(DEFAULT_GUI.font_family, DEFAULT_GUI.font_size))
    ScientificStyle.apply(app)

    window = MainWindow()
    for volume in load_volumes(args):
        window.controller.load_series(volume)
    window.show()
    return app.exec()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.debug else logging.INFO)

    if args.batch_output:
        return run_headless(args)
    return run_gui(args)


if __name__ == "__main__":
    sys.exit(main())
