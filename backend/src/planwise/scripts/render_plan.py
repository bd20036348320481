"""Render a plan text file.

Usage:
  python -m planwise.scripts.render_plan PLAN.txt [--style emoji|markdown] [--format html|json]
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from ..services.block_converter import build_render_payload, render_html
from ..services.plan_parser import MARKER_TABLES, get_marker_table, parse_plan


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Render plan text as HTML or JSON blocks")
    parser.add_argument("path", type=Path)
    parser.add_argument("--style", default="emoji", choices=sorted(MARKER_TABLES))
    parser.add_argument("--format", default="html", choices=["html", "json"])
    args = parser.parse_args(argv)

    if not args.path.exists():
        raise SystemExit(f"File not found: {args.path}")
    text = args.path.read_text(encoding="utf-8")
    blocks = parse_plan(text, get_marker_table(args.style))
    if args.format == "json":
        print(json.dumps(build_render_payload(blocks), ensure_ascii=False, indent=2))
    else:
        print(render_html(blocks, raw_text=text))


if __name__ == "__main__":
    main()
