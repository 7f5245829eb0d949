"""
Example pipeline: build each shape, tessellate it twice and save an SVG.

Per shape:
1. Build the path (tessvg.path.build_example_path)
2. Stroke pass -> document in the stroke color
3. Fill pass -> document in the fill color, appended on top
4. Save <output_dir>/<ShapeName>.svg

Errors from any step are TessvgError subclasses. make_examples is the only
place that decides whether a failure aborts the run or skips the shape.
"""

import logging
import os
from typing import List, Optional

from .config import ExampleConfig
from .errors import OutputError, TessvgError
from .path import ExampleShape, Path, build_example_path
from .svg import SvgDocument, make_document, output_filename, save_svg
from .tessellate import tessellate_fill, tessellate_stroke

log = logging.getLogger(__name__)


def stroke_document(path: Path, config: Optional[ExampleConfig] = None) -> SvgDocument:
    """Stroke-tessellate a path and render it in the stroke color."""
    config = config or ExampleConfig()
    geometry = tessellate_stroke(path, config.stroke_options)
    return make_document(geometry, config.stroke_color, config.style)


def fill_document(path: Path, config: Optional[ExampleConfig] = None) -> SvgDocument:
    """Fill-tessellate a path and render it in the fill color."""
    config = config or ExampleConfig()
    geometry = tessellate_fill(path, config.fill_options)
    return make_document(geometry, config.fill_color, config.style)


def render_example(shape: ExampleShape, config: Optional[ExampleConfig] = None) -> SvgDocument:
    """Build one example shape and compose its stroke and fill documents."""
    config = config or ExampleConfig()
    path = build_example_path(shape)
    document = stroke_document(path, config)
    document.extend(fill_document(path, config))
    return document


def ensure_output_dir(output_dir: str) -> str:
    try:
        os.makedirs(output_dir, exist_ok=True)
    except OSError as e:
        raise OutputError(f"Failed to create output directory {output_dir}: {e}", filename=output_dir) from e
    return output_dir


def make_example(shape: ExampleShape, config: Optional[ExampleConfig] = None) -> str:
    """Render one example shape and save it. Returns the written file path."""
    config = config or ExampleConfig()
    document = render_example(shape, config)
    ensure_output_dir(config.output_dir)
    return save_svg(document, output_filename(config.output_dir, str(shape)))


def make_examples(config: Optional[ExampleConfig] = None) -> List[str]:
    """
    Generate every configured example shape, one after the other.

    With config.keep_going a failing shape is logged and skipped; otherwise
    the first failure is logged and re-raised, aborting the run.

    Returns:
        Paths of the files written
    """
    config = config or ExampleConfig()
    written = []
    for shape in config.shapes:
        try:
            written.append(make_example(shape, config))
        except TessvgError as e:
            if not config.keep_going:
                log.error("%s: %s (aborting)", shape, e)
                raise
            log.error("%s: %s (skipped)", shape, e)
    return written
