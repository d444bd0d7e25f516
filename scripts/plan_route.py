# scripts/plan_route.py
from __future__ import annotations

from pathlib import Path
import sys
import json
import argparse

# --- Make repo imports work ---
REPO_ROOT = Path(__file__).resolve().parents[1]       # project root
API_DIR   = REPO_ROOT / "backend" / "api"
sys.path.insert(0, str(API_DIR))

from dotenv import load_dotenv
load_dotenv(API_DIR / ".env")

# Now import using the same short paths the app uses
from services.directions import build_default_pipeline
from services.errors import DirectionsError


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Print driving directions between two addresses as JSON.")
    parser.add_argument("source", help="start address")
    parser.add_argument("destination", help="end address")
    parser.add_argument("--indent", type=int, default=2, help="JSON indent (0 for compact)")
    args = parser.parse_args(argv)

    pipeline = build_default_pipeline()
    try:
        result = pipeline.plan(args.source, args.destination)
    except DirectionsError as e:
        print(json.dumps({"error": e.user_message}), file=sys.stderr)
        return 1

    print(json.dumps(result.model_dump(mode="json"), indent=args.indent or None))
    return 0


if __name__ == "__main__":
    sys.exit(main())
