#!/usr/bin/env python3
"""
photopost command line.

Apply an effect and zoom to a photo, or publish it to the photo service
without opening the GUI:

  photopost render  --input in.jpg --output out.jpg --effect sepia --intensity 60 --scale 75
  photopost publish --input in.jpg --effect heat --hashtags "#summer #sea" --description "Beach"
  photopost                       (no subcommand: start the GUI)
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from PIL import Image

from photopost.app.config import CONFIG_PATH_ENV, AppConfig
from photopost.app.errors import PhotoPostError, ResourceError, ValidationError
from photopost.app.preview import load_image_rgb
from photopost.app.submission import SubmissionPipeline
from photopost.core.effects import INTENSITY_DEFAULT, apply_effect, compute_effect, normalize_intensity
from photopost.core.models import EFFECT_NONE, EFFECTS, EditForm
from photopost.core.scale import ScaleController
from photopost.net.api import PhotoApi
from photopost.validation.validator import format_report_text, validate_form

logger = logging.getLogger(__name__)


def render_photo(
    input_path: str,
    output_path: str,
    effect: str = EFFECT_NONE,
    intensity: int = INTENSITY_DEFAULT,
    scale: int = 100,
) -> Image.Image:
    """
    Render ``input_path`` with an effect and a zoom and save it to ``output_path``.

    Scale shrinks the picture on a canvas of the original size, like the
    preview does; 100% leaves the geometry untouched.
    """
    img = load_image_rgb(input_path)
    img = apply_effect(img, compute_effect(effect, intensity))

    factor = ScaleController(scale).current_transform()
    if factor < 1.0:
        w, h = img.size
        small = img.resize((max(1, round(w * factor)), max(1, round(h * factor))), Image.LANCZOS)
        canvas = Image.new("RGB", (w, h), (255, 255, 255))
        canvas.paste(small, ((w - small.width) // 2, (h - small.height) // 2))
        img = canvas

    try:
        if output_path.lower().endswith((".jpg", ".jpeg")):
            img.save(output_path, format="JPEG", quality=95, optimize=True)
        else:
            img.save(output_path)
    except (OSError, ValueError) as e:
        raise ResourceError(f"Could not save {output_path}: {e}", path=output_path) from e
    return img


def publish_photo(api: PhotoApi, form: EditForm):
    """Validate a form and submit it. Raises ValidationError or TransportError."""
    report = validate_form(form.hashtags, form.description)
    if not report.passed:
        logger.info("Validation failed:\n%s", format_report_text(report))
        first = next(r for r in report.results if not r.valid)
        raise ValidationError(first.field, first.message)
    return SubmissionPipeline(api).submit(form)


def _add_edit_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--input", "-i", required=True, help="Path to the photo")
    p.add_argument("--effect", choices=EFFECTS, default=EFFECT_NONE, help="Effect (default: none)")
    p.add_argument("--intensity", type=int, default=INTENSITY_DEFAULT, help="Effect intensity 0-100 (default: 100)")
    p.add_argument("--scale", type=int, default=100, help="Zoom in percent, 25-100 in steps of 25 (default: 100)")


def _build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="photopost", description="Edit and publish photos.")
    p.add_argument("--config", default=os.environ.get(CONFIG_PATH_ENV), help="Path to a JSON settings file")
    sub = p.add_subparsers(dest="command")

    render = sub.add_parser("render", help="Apply an effect and zoom, save the result")
    _add_edit_args(render)
    render.add_argument("--output", "-o", required=True, help="Path to the output image")

    publish = sub.add_parser("publish", help="Validate and upload a photo")
    _add_edit_args(publish)
    publish.add_argument("--hashtags", default="", help='Space separated, e.g. "#sea #sun"')
    publish.add_argument("--description", default="", help="Up to 140 characters")
    publish.add_argument("--base-url", default=None, help="Override the service URL")
    return p


def main(argv: Optional[list[str]] = None) -> int:
    args = _build_arg_parser().parse_args(argv)

    try:
        config = AppConfig.load(args.config)
        if getattr(args, "base_url", None):
            config = config.merged({"base_url": args.base_url})
    except PhotoPostError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    if args.command is None:
        from photopost.ui.main_window import run
        run(config)
        return 0

    logging.basicConfig(level=getattr(logging, config.log_level.upper(), logging.INFO),
                        format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.command == "render":
            render_photo(args.input, args.output, args.effect, normalize_intensity(args.intensity), args.scale)
            print(f"Saved: {args.output}")
            return 0

        form = EditForm(
            source_path=Path(args.input),
            hashtags=args.hashtags,
            description=args.description,
            effect=args.effect,
            intensity=normalize_intensity(args.intensity),
            scale_percent=ScaleController(args.scale).value,
        )
        publish_photo(PhotoApi(config.base_url, timeout=config.timeout), form)
    except PhotoPostError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    print(f"Published: {args.input}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
