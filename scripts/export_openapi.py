#!/usr/bin/env python3

"""Write the bucket gateway OpenAPI document to a directory."""

import argparse
import json
from pathlib import Path

from bucket_gateway.common.config import Settings
from bucket_gateway.main import create_app


def export_openapi(target_dir: Path, *, filename: str = "openapi.json") -> Path:
    """Render the schema without touching storage and return the written path."""
    app = create_app(Settings(ENABLE_METRICS=False))
    schema = app.openapi()

    target_dir.mkdir(parents=True, exist_ok=True)
    output_path = target_dir / filename
    with output_path.open("w", encoding="utf-8") as fp:
        json.dump(schema, fp, ensure_ascii=False, indent=2)
        fp.write("\n")
    return output_path


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Export the bucket gateway OpenAPI document."
    )
    parser.add_argument("target_dir", type=Path, help="Output directory.")
    parser.add_argument("--filename", default="openapi.json")
    args = parser.parse_args()

    output_path = export_openapi(args.target_dir.resolve(), filename=args.filename)
    print(f"OpenAPI schema exported to {output_path}")


if __name__ == "__main__":
    main()
