#!/usr/bin/env python3
# =============================================================================
# scripts/add_listing.py - Add a Project or Testimonial from the Command Line
# =============================================================================
# Runs the same crop -> upload -> submit flow as the admin panel against a
# running API.
#
# Usage:
#   python scripts/add_listing.py project house.jpg --name "Lakeside Villas" \
#       --description "Twelve villas on the lake" --zoom 1.2
#
#   python scripts/add_listing.py client face.png --name "Jane Doe" \
#       --designation "CEO, Acme" --description "Great team" \
#       --base-url http://localhost:8000
# =============================================================================

import argparse
import os
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from client import ContentAPIClient, DraftKind, UploadFlow
from lib.utils import ApplicationError


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Crop an image and add it as a project or testimonial")
    parser.add_argument("kind", choices=[k.value for k in DraftKind])
    parser.add_argument("image", type=Path)
    parser.add_argument("--name", required=True)
    parser.add_argument("--description", default="")
    parser.add_argument("--designation", default="", help="Testimonials only")
    parser.add_argument("--zoom", type=float, default=1.0)
    parser.add_argument("--pan-x", type=float, default=0.0)
    parser.add_argument("--pan-y", type=float, default=0.0)
    parser.add_argument("--base-url", default=os.environ.get("SHOWCASE_API_URL", "http://localhost:8000"))
    parser.add_argument("--prefix", default=os.environ.get("SHOWCASE_API_PREFIX", "/api/v1"))
    parser.add_argument("--api-key", default=os.environ.get("SHOWCASE_API_KEY"))
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    kind = DraftKind(args.kind)

    api = ContentAPIClient.connect(args.base_url, prefix=args.prefix, api_key=args.api_key)
    flow = UploadFlow(api, kind)

    try:
        flow.select_file(args.image.read_bytes(), args.image.name)
        flow.open_cropper()
        flow.update_selection(zoom=args.zoom, pan_x=args.pan_x, pan_y=args.pan_y)
        rect = flow.crop_rect
        print(f"Cropping {rect.width}x{rect.height} at ({rect.x}, {rect.y})")

        path = flow.confirm_crop()
        print(f"Uploaded image: {path}")

        fields = {"name": args.name, "description": args.description}
        if kind is DraftKind.CLIENT:
            fields["designation"] = args.designation
        flow.update_fields(**fields)

        record = flow.submit()
        print(f"Added {kind.value} {record['id']}")
        return 0

    except ApplicationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error reading {args.image}: {e}", file=sys.stderr)
        return 1
    finally:
        api.close()


if __name__ == "__main__":
    sys.exit(main())
