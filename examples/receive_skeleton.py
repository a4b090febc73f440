#!/usr/bin/env python3
"""
Example: Receive and print skeletal animation from Houdini LiveLink.

This script demonstrates how to use LiveLinkSource with a LatestFrameClient
to receive skeleton data from Houdini and print the received frames.

Usage:
    python receive_skeleton.py --endpoint 127.0.0.1:8010
    python receive_skeleton.py --endpoint 127.0.0.1:8010 --transport http --rate 30
    python receive_skeleton.py --endpoint 0.0.0.0:8010 --verbose
"""

import argparse
import logging
import os
import sys
import time

# Allow running without installing the package (add project root to path)
_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _root not in sys.path:
    sys.path.insert(0, _root)

from houdini_livelink_python import LatestFrameClient, create_source
from houdini_livelink_python.utils import quat_to_euler, set_log_level


def main():
    parser = argparse.ArgumentParser(description="Receive and print Houdini LiveLink data")

    parser.add_argument(
        "--endpoint",
        type=str,
        default="127.0.0.1:8010",
        help="Houdini endpoint as host:port (default: 127.0.0.1:8010)",
    )

    parser.add_argument(
        "--transport",
        choices=["udp", "http"],
        default="udp",
        help="udp: Houdini pushes datagrams, http: poll Houdini's server (default: udp)",
    )

    parser.add_argument(
        "--rate",
        type=float,
        default=60.0,
        help="Refresh rate in frames per second (default: 60)",
    )

    parser.add_argument(
        "--subject",
        type=str,
        default="Houdini Subject",
        help="Subject name to publish under",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Print detailed bone information",
    )

    parser.add_argument(
        "--print_rate",
        action="store_true",
        default=False,
        help="Print frame rate statistics",
    )

    args = parser.parse_args()

    if args.verbose:
        set_log_level(logging.DEBUG)

    source = create_source(args.endpoint, refresh_rate=args.rate,
                           transport=args.transport, subject_name=args.subject)
    if source is None:
        print(f"[Main] Invalid endpoint: {args.endpoint}")
        return 1

    client = LatestFrameClient()
    if not source.receive_client(client):
        print(f"[Main] Could not open {args.endpoint} ({source.status})")
        return 1

    frame_count = 0
    fps_start_time = time.time()
    fps_display_interval = 2.0

    print(f"[Main] Waiting for Houdini on {args.endpoint} ({args.transport})...")
    print("[Main] Press Ctrl+C to stop")

    try:
        while source.is_source_still_valid():
            frame = client.get_latest_frame()

            if frame is None:
                time.sleep(0.001)
                continue

            topology = client.get_topology(frame["subject"])
            pose = frame["pose"]
            print(f"\n[Frame {frame['frame_idx']}] Subject: {frame['subject'].subject_name}, "
                  f"Bones: {pose.num_bones}, Curves: {len(pose.curve_values)}")

            names = topology.bone_names if topology else [str(i) for i in range(pose.num_bones)]
            if args.verbose:
                for idx, (name, bone) in enumerate(zip(names, pose.bone_transforms)):
                    pos = bone.position
                    rot = quat_to_euler(bone.rotation)
                    print(f"  [{idx:2d}] {name:20s} "
                          f"pos=({pos[0]:7.3f}, {pos[1]:7.3f}, {pos[2]:7.3f}) "
                          f"rot=({rot[0]:7.2f}, {rot[1]:7.2f}, {rot[2]:7.2f})")
            else:
                print(f"  Bones: {', '.join(names[:5])}{'...' if len(names) > 5 else ''}")

            frame_count += 1

            if args.print_rate:
                current_time = time.time()
                if current_time - fps_start_time >= fps_display_interval:
                    fps = frame_count / (current_time - fps_start_time)
                    print(f"[Main] Frame rate: {fps:.1f} fps, publish rate: "
                          f"{client.get_receive_rate():.1f} Hz")
                    frame_count = 0
                    fps_start_time = current_time

    except KeyboardInterrupt:
        print("\n[Main] Stopping...")
    finally:
        source.request_source_shutdown()
        print("[Main] Done")
    return 0


if __name__ == "__main__":
    sys.exit(main())
