import argparse
import base64
import json
import logging
import os
import sys
import requests
from requests.exceptions import RequestException


def main(argv=None):
    parser = argparse.ArgumentParser(description="Arrange furniture in a room via the API")
    parser.add_argument(
        "--api",
        default="http://localhost:8000",
        help="Base URL of the furniture arrangement API",
    )
    parser.add_argument(
        "--request",
        default="sample_request.json",
        help="Path to JSON file with room, furniture and optional placements",
    )
    parser.add_argument("--outdir", default="arranged_cli", help="Directory to save outputs")
    parser.add_argument("--api-key", default="testkey", help="API key for authentication")
    parser.add_argument(
        "--color-scheme",
        default="default",
        choices=["default", "monochrome", "pastel", "bold"],
        help="Furniture colors in the rendered plan",
    )
    parser.add_argument(
        "--enforce-nightstand-symmetry",
        action="store_true",
        help="Move nightstands beside a bed to mirrored wall positions",
    )
    parser.add_argument(
        "--correct-bed-placement",
        action="store_true",
        help="Move the bed against the longer wall",
    )
    parser.add_argument("--timeout", type=float, default=30.0, help="Request timeout in seconds")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    log = logging.getLogger(__name__)

    try:
        with open(args.request, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        log.error("Failed to read request file %s: %s", args.request, e)
        sys.exit(1)

    payload["include_svg"] = True
    payload["color_scheme"] = args.color_scheme
    if args.enforce_nightstand_symmetry or args.correct_bed_placement:
        config = dict(payload.get("config") or {})
        if args.enforce_nightstand_symmetry:
            config["enforce_nightstand_symmetry"] = True
        if args.correct_bed_placement:
            config["correct_bed_placement"] = True
        payload["config"] = config

    headers = {"X-API-Key": args.api_key}
    url = f"{args.api.rstrip('/')}/arrange"
    try:
        resp = requests.post(url, json=payload, headers=headers, timeout=args.timeout)
        resp.raise_for_status()
        data = resp.json()
    except RequestException as e:
        print(f"Request to {url} failed: {e}")
        return 1

    os.makedirs(args.outdir, exist_ok=True)
    svg_path = os.path.join(args.outdir, "layout.svg")
    if data.get("svg_data_url"):
        svg_bytes = base64.b64decode(data["svg_data_url"].split(",", 1)[1])
        try:
            with open(svg_path, "wb") as f:
                f.write(svg_bytes)
        except OSError as e:
            log.error("Failed to write SVG to %s: %s", svg_path, e)
            sys.exit(1)
        print(f"Saved SVG to {svg_path}")

    json_path = os.path.join(args.outdir, "layout.json")
    try:
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump(data["layout"], f, indent=2)
    except OSError as e:
        log.error("Failed to write layout JSON to %s: %s", json_path, e)
        sys.exit(1)

    for diag in data["layout"].get("diagnostics", []):
        log.info("[%s] %s", diag.get("kind"), diag.get("message"))
    evaluation = data.get("evaluation") or {}
    if evaluation:
        print(f"Score: {evaluation.get('score')} ({'passed' if evaluation.get('passed') else 'failed'})")
    if data.get("usedFallback"):
        print("Layout produced by the fallback planner")
    proc_time = data.get("metadata", {}).get("processing_time")
    if proc_time is not None:
        print(f"Processing time: {proc_time:.2f}s")
    print(f"Saved layout JSON to {json_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
