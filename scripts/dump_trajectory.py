#!/usr/bin/env python3
"""Convert a recorded pose log and dump every frame's streams.

The input is a JSON file with two parallel arrays: ``records`` (one
OXTS-style mapping per frame) and ``timestamps``.

Usage
-----
::

    python scripts/dump_trajectory.py log.json

Options::

    --frames N          Trajectory window length (default: rest of the log)
    --planar            Treat lat/lon/alt as local metres instead of degrees
    --seek T            Also open a loader, seek to T and print the current frame
    --output FILE       Write output to FILE instead of stdout
    --verbose, -v       Enable debug logging
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyvlog import LoaderConfig, MemoryLoader, PlanarProjection, PoseConverter, VlogError  # noqa: E402


def _jsonable(value: Any) -> Any:
    if hasattr(value, "to_stream_dict"):
        return value.to_stream_dict()
    return value


def main() -> int:
    parser = argparse.ArgumentParser(description="Dump converted pose streams for a recorded log")
    parser.add_argument("path", type=Path, help="JSON file with 'records' and 'timestamps'")
    parser.add_argument("--frames", type=int, default=None, help="Trajectory window length")
    parser.add_argument("--planar", action="store_true", help="Pose fields are local metres")
    parser.add_argument("--seek", type=float, default=None, help="Seek a loader to this time")
    parser.add_argument("--output", "-o", help="Write output to FILE instead of stdout")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    payload = json.loads(args.path.read_text(encoding="utf-8"))
    config = LoaderConfig.from_env(trajectory_frames=args.frames)
    converter = PoseConverter(
        payload.get("records", []),
        payload.get("timestamps", []),
        config=config,
        projection=PlanarProjection() if args.planar else None,
    )

    try:
        converter.load()
        streams = converter.build_streams()
    except VlogError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    result: dict[str, Any] = {
        "metadata": converter.get_log_metadata().model_dump(mode="json", by_alias=True, exclude_none=True),
        "streams": {name: [_jsonable(v) for v in values] for name, values in streams.items()},
    }

    if args.seek is not None:
        loader = MemoryLoader(converter.get_log_metadata(), streams, config=config)
        loader.connect()
        loader.seek(args.seek)
        frame = loader.get_current_frame() or {}
        result["current"] = {
            "time": loader.get_current_time(),
            "frame": {name: _jsonable(value) for name, value in frame.items()},
        }
        loader.close()

    text = json.dumps(result, indent=2, default=str)
    if args.output:
        Path(args.output).write_text(text + "\n", encoding="utf-8")
    else:
        print(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
