"""GPX export of a saved walk."""

from datetime import datetime
from typing import Iterable
from xml.sax.saxutils import escape

from .models import WalkPoint
from .notify import format_point


def walk_to_gpx(points: Iterable[WalkPoint], name: str = "Random Walk") -> str:
    """Render points as a GPX 1.1 document: one waypoint per point plus a track"""
    ordered = sorted(points, key=lambda p: p.ordinal)
    timestamp = datetime.now().isoformat()

    gpx_lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<gpx version="1.1" creator="RandomWalk"',
        '     xmlns="http://www.topografix.com/GPX/1/1"',
        '     xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"',
        '     xsi:schemaLocation="http://www.topografix.com/GPX/1/1 http://www.topografix.com/GPX/1/1/gpx.xsd">',
        '  <metadata>',
        f'    <name>{escape(name)} ({len(ordered)} points)</name>',
        f'    <time>{timestamp}</time>',
        '  </metadata>',
    ]

    for point in ordered:
        gpx_lines.append(f'  <wpt lat="{point.lat:.7f}" lon="{point.lon:.7f}">')
        gpx_lines.append(f'    <name>{escape(format_point(point.ordinal, point.lat, point.lon))}</name>')
        gpx_lines.append('  </wpt>')

    gpx_lines.append('  <trk>')
    gpx_lines.append(f'    <name>{escape(name)}</name>')
    gpx_lines.append('    <trkseg>')
    for point in ordered:
        gpx_lines.append(f'      <trkpt lat="{point.lat:.7f}" lon="{point.lon:.7f}"></trkpt>')
    gpx_lines.append('    </trkseg>')
    gpx_lines.append('  </trk>')
    gpx_lines.append('</gpx>')

    return "\n".join(gpx_lines) + "\n"


def export_gpx(points: Iterable[WalkPoint], path: str, name: str = "Random Walk") -> int:
    """Write the walk to a GPX file. Returns the number of points written."""
    ordered = sorted(points, key=lambda p: p.ordinal)
    with open(path, "w") as f:
        f.write(walk_to_gpx(ordered, name=name))
    return len(ordered)
