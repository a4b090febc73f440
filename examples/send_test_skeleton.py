#!/usr/bin/env python3
"""
Example: Send a test skeleton over UDP, the way Houdini's LiveLink HDA does.

Sends the skeleton handshake every --handshake seconds and a pose message
for a three-bone arm at --hz.

Usage:
    python send_test_skeleton.py --dest 127.0.0.1 --port 8010 --hz 60
"""

import argparse
import json
import math
import socket
import time


NAMES = ["root", "shoulder", "elbow"]
PARENTS = [None, 0, 1]
VERTICES = [[0.0, 0.0, 0.0], [0.0, 1.5, 0.0], [0.3, 1.5, 0.0]]


def skeleton_message():
    return {"names": NAMES, "parents": PARENTS, "vertices": VERTICES}


def pose_message(t):
    swing = 45.0 * math.sin(t)
    return {
        "positions": VERTICES,
        "rotations": [[0.0, 0.0, 0.0], [0.0, 0.0, swing], [0.0, 0.0, swing * 0.5]],
        "scales": [[1.0, 1.0, 1.0]] * len(NAMES),
    }


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--dest", default="127.0.0.1", help="Receiver IP")
    ap.add_argument("--port", type=int, default=8010, help="Receiver UDP port")
    ap.add_argument("--hz", type=float, default=60.0, help="Send rate")
    ap.add_argument("--handshake", type=float, default=1.0, help="Seconds between skeleton messages")
    args = ap.parse_args()

    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    dest = (args.dest, args.port)

    period = 1.0 / max(args.hz, 1.0)
    next_t = time.perf_counter()
    last_handshake = 0.0
    last_print = time.time()
    sent = 0

    print(f"[sender] -> {dest}  at ~{args.hz:.1f} Hz")
    try:
        while True:
            now = time.perf_counter()
            if now < next_t:
                time.sleep(next_t - now)
            next_t += period

            if time.time() - last_handshake >= args.handshake:
                msg = skeleton_message()
                last_handshake = time.time()
            else:
                msg = pose_message(time.time())
            sock.sendto(json.dumps(msg).encode("utf-8"), dest)
            sent += 1

            if time.time() - last_print > 1.0:
                print(f"[sender] sent {sent} pkts in last 1s")
                sent = 0
                last_print = time.time()
    except KeyboardInterrupt:
        print("\n[sender] bye")
    finally:
        sock.close()


if __name__ == "__main__":
    main()
