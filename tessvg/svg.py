"""
SVG document building and saving for tessvg.

Renders GeometryBuffers as one closed path node per triangle, and writes or
reads the resulting documents.
"""

import logging
import os
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from .config import DocumentStyle
from .errors import OutputError, TessvgError
from .tessellate import GeometryBuffers

log = logging.getLogger(__name__)

SVG_NS = 'http://www.w3.org/2000/svg'


def format_number(value: float) -> str:
    """Shortest float32 representation without trailing zeros ('1', '0.1', '-2.5')."""
    value = np.float32(value) + np.float32(0.0)  # normalizes -0.0
    return np.format_float_positional(value, trim='-')


class PathData:
    """Absolute move/line/close drawing commands of one path node."""

    def __init__(self, commands=None):
        self.commands: List[Tuple[str, Tuple[float, ...]]] = list(commands or [])

    def move_to(self, point) -> 'PathData':
        self.commands.append(('M', (float(point[0]), float(point[1]))))
        return self

    def line_to(self, point) -> 'PathData':
        self.commands.append(('L', (float(point[0]), float(point[1]))))
        return self

    def close(self) -> 'PathData':
        self.commands.append(('Z', ()))
        return self

    def points(self) -> List[Tuple[float, float]]:
        return [args for cmd, args in self.commands if cmd in 'ML']

    def __len__(self):
        return len(self.commands)

    def __eq__(self, other):
        return isinstance(other, PathData) and self.commands == other.commands

    def __str__(self):
        parts = []
        for cmd, args in self.commands:
            if args:
                parts.append(cmd + ','.join(format_number(v) for v in args))
            else:
                parts.append(cmd)
        return ' '.join(parts)

    def __repr__(self):
        return f'PathData({str(self)!r})'


@dataclass
class PathNode:
    """One <path> element."""
    fill: str
    data: PathData
    stroke: str = 'black'
    stroke_width: float = 0.1

    def to_element(self) -> ET.Element:
        elem = ET.Element('path')
        elem.set('d', str(self.data))
        elem.set('fill', self.fill)
        elem.set('stroke', self.stroke)
        elem.set('stroke-width', format_number(self.stroke_width))
        return elem


@dataclass
class SvgDocument:
    """Ordered list of path nodes with a fixed viewBox."""
    view_box: Tuple[float, float, float, float] = (0, 0, 90, 90)
    nodes: List[PathNode] = field(default_factory=list)

    def add(self, node: PathNode) -> 'SvgDocument':
        self.nodes.append(node)
        return self

    def extend(self, other: 'SvgDocument') -> 'SvgDocument':
        """Append all nodes of another document (drawn on top of ours)."""
        self.nodes.extend(other.nodes)
        return self

    def __len__(self):
        return len(self.nodes)

    def to_element(self) -> ET.Element:
        svg = ET.Element('svg')
        svg.set('viewBox', ' '.join(format_number(v) for v in self.view_box))
        svg.set('xmlns', SVG_NS)
        for node in self.nodes:
            svg.append(node.to_element())
        return svg

    def to_string(self) -> str:
        tree = ET.ElementTree(self.to_element())
        ET.indent(tree, space='  ')
        return ET.tostring(tree.getroot(), encoding='unicode')

    def save(self, path: str) -> str:
        return save_svg(self, path)


def make_document(geometry: GeometryBuffers, fill_color: str,
                  style: Optional[DocumentStyle] = None) -> SvgDocument:
    """
    Render a geometry buffer as one closed path node per triangle.

    Triangles are emitted in index order; each node draws
    M v0 L v1 L v2 Z with the given fill and the style's outline.
    """
    style = style or DocumentStyle()
    geometry.validate()

    document = SvgDocument(view_box=tuple(style.view_box))
    positions = geometry.vertices[:, :2].tolist()

    for a, b, c in geometry.triangles().tolist():
        data = PathData().move_to(positions[a]).line_to(positions[b]).line_to(positions[c]).close()
        document.add(PathNode(
            fill=fill_color,
            data=data,
            stroke=style.outline_color,
            stroke_width=style.outline_width,
        ))

    return document


def save_svg(document: SvgDocument, path: str) -> str:
    """Write a document to an SVG file. Raises OutputError on failure."""
    tree = ET.ElementTree(document.to_element())
    ET.indent(tree, space='  ')
    try:
        tree.write(path, encoding='utf-8', xml_declaration=True)
    except OSError as e:
        raise OutputError(f"Failed to write SVG file {path}: {e}", filename=path) from e
    log.info("Saved %s (%d paths)", path, len(document.nodes))
    return path


def _parse_path_d(d: str) -> PathData:
    """Parse absolute M/L/Z path data (the subset written by make_document)."""
    data = PathData()
    tokens = re.findall(r'[MLZmlz]|[-+]?[0-9]*\.?[0-9]+(?:[eE][-+]?[0-9]+)?', d)

    i = 0
    while i < len(tokens):
        cmd = tokens[i]
        if cmd in 'ML':
            x, y = float(tokens[i + 1]), float(tokens[i + 2])
            if cmd == 'M':
                data.move_to((x, y))
            else:
                data.line_to((x, y))
            i += 3
        elif cmd in 'Zz':
            data.close()
            i += 1
        else:
            raise ValueError(f"Unsupported path command {cmd!r} in {d!r}")
    return data


def read_document(path: str) -> SvgDocument:
    """Load an SVG written by save_svg back into an SvgDocument."""
    try:
        root = ET.parse(path).getroot()
    except (OSError, ET.ParseError) as e:
        raise TessvgError(f"Failed to read SVG file {path}: {e}") from e

    view_box = tuple(float(v) for v in root.get('viewBox', '0 0 90 90').split())
    document = SvgDocument(view_box=view_box)

    for elem in root.iter():
        if elem.tag.split('}')[-1] != 'path':
            continue
        document.add(PathNode(
            fill=elem.get('fill', 'black'),
            data=_parse_path_d(elem.get('d', '')),
            stroke=elem.get('stroke', 'none'),
            stroke_width=float(elem.get('stroke-width', 1.0)),
        ))
    return document


def output_filename(output_dir: str, name: str) -> str:
    return os.path.join(output_dir, f'{name}.svg')
