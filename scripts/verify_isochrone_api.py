"""
Manual acceptance script for /api/isochrones/{transport} and /api/overlaps
Usage:
  python scripts/verify_isochrone_api.py --base-url http://127.0.0.1:8000
"""

import argparse
import requests


def build_sample_markers(transport, range_m):
    # Three markers around central London, the first two close enough to overlap
    return [
        {"id": "m1", "location": [-0.1278, 51.5074], "transport": transport, "range": range_m},
        {"id": "m2", "location": [-0.1150, 51.5074], "transport": transport, "range": range_m},
        {"id": "m3", "location": [0.5000, 51.9000], "transport": transport, "range": range_m},
    ]


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--base-url", default="http://127.0.0.1:8000")
    parser.add_argument(
        "--transport",
        choices=["driving-car", "cycling-regular", "foot-walking"],
        default="foot-walking",
    )
    parser.add_argument("--range", type=float, default=1000.0)
    args = parser.parse_args()

    base = args.base_url.rstrip("/")
    payload = {"locations": [[-0.1, 51.5]], "range": [args.range], "id": "m1"}

    resp = requests.post(f"{base}/api/isochrones/{args.transport}", json=payload, timeout=20)
    print("status:", resp.status_code)
    print("cache-control:", resp.headers.get("Cache-Control"))
    resp.raise_for_status()

    data = resp.json()
    print("type:", data.get("type"))
    print("features:", len(data.get("features") or []))
    print("timestamp:", (data.get("metadata") or {}).get("timestamp"))

    resp = requests.post(
        f"{base}/api/overlaps",
        json={"markers": build_sample_markers(args.transport, args.range)},
        timeout=20,
    )
    print("overlaps status:", resp.status_code)
    resp.raise_for_status()

    data = resp.json()
    print("isochrones:", len(data["isochrones"]["features"]))
    print("intersections:", len(data["intersections"]["features"]))
    for feature in data["intersections"]["features"]:
        print("  pair:", feature["properties"]["markers"])
    print("failed:", data.get("failed"))


if __name__ == "__main__":
    main()
