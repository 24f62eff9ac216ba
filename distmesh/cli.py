"""Command line driver: mesh one of a few built-in 2D domains.

Examples:
  python -m distmesh --shape circle --h0 0.2 --out-png disk.png
  python -m distmesh --shape square --fix-corners --out-vtk square.vtk
  python -m distmesh --shape annulus --h0 0.05 --max-steps 2000 --log-level DEBUG
"""
from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

import numpy as np

from .core.boundary import bound_edges
from .core.config import DistMeshConfig
from .core.exceptions import DistMeshError
from .core.fields import ConstantField, FunctionField, circle, ellipse, rectangle
from .core.geometry import triangle_quality
from .core.io import write_msh, write_vtk
from .core.logging_utils import configure_logging, get_logger
from .core.relaxation import relax
from .core.sampling import bounding_box
from .core.stats import format_stats_table

logger = get_logger('distmesh.cli')

SHAPES = ('circle', 'square', 'ellipse', 'annulus')


def build_domain(shape: str, fix_corners: bool = False):
    """Return ``(distance, size, box, fixed_points)`` for a named shape."""
    box = bounding_box(2)
    fixed = None
    size = ConstantField(1.0)
    if shape == 'circle':
        distance = circle(1.0)
    elif shape == 'square':
        distance = rectangle((-1.0, -1.0), (1.0, 1.0))
        if fix_corners:
            fixed = np.array([[-1.0, -1.0], [1.0, -1.0], [1.0, 1.0], [-1.0, 1.0]])
    elif shape == 'ellipse':
        distance = ellipse((1.0, 0.5))
    elif shape == 'annulus':
        distance = circle(1.0) - circle(0.4)
        # finer elements along the inner ring
        size = FunctionField(lambda p: 0.5 + np.sqrt(np.einsum('ij,ij->i', p, p)), name='radial')
    else:
        raise ValueError(f"unknown shape {shape!r}")
    if fix_corners and shape != 'square':
        raise ValueError("--fix-corners is only meaningful for --shape square")
    return distance, size, box, fixed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='distmesh', description='Generate a triangle mesh of a built-in 2D domain')
    parser.add_argument('--shape', choices=SHAPES, default='circle')
    parser.add_argument('--h0', type=float, default=0.2, help='initial edge length (default: 0.2)')
    parser.add_argument('--max-steps', type=int, dest='max_steps', default=None,
                        help='iteration cap (default: %d)' % DistMeshConfig().max_steps)
    parser.add_argument('--seed', type=int, default=0, help='sampling seed (default: 0)')
    parser.add_argument('--fix-corners', action='store_true', dest='fix_corners',
                        help='keep the four square corners fixed')
    parser.add_argument('--out-vtk', type=str, dest='out_vtk', default=None)
    parser.add_argument('--out-msh', type=str, dest='out_msh', default=None)
    parser.add_argument('--out-png', type=str, dest='out_png', default=None)
    parser.add_argument('--log-level', type=str, choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(getattr(logging, args.log_level.upper(), logging.INFO))

    options = {'seed': args.seed}
    if args.max_steps is not None:
        options['max_steps'] = args.max_steps
    try:
        distance, size, box, fixed = build_domain(args.shape, args.fix_corners)
        result = relax(distance, args.h0, size, box, fixed, **options)
    except (DistMeshError, ValueError) as exc:
        logger.error('%s', exc)
        return 2

    points, triangles = result
    quality = triangle_quality(points, triangles)
    boundary = bound_edges(points, triangles)
    logger.info('mesh: %d points, %d triangles, %d boundary edges, converged=%s',
                len(points), len(triangles), len(boundary.indices), result.converged)
    if quality.size:
        logger.info('quality: mean=%.4f min=%.4f', float(quality.mean()), float(quality.min()))
    logger.info('run statistics:\n%s', format_stats_table(result.stats))

    if args.out_vtk:
        write_vtk(args.out_vtk, points, triangles, cell_data={'quality': quality})
        logger.info('wrote %s', args.out_vtk)
    if args.out_msh:
        write_msh(args.out_msh, points, triangles)
        logger.info('wrote %s', args.out_msh)
    if args.out_png:
        from .core.visualization import plot_mesh
        plot_mesh(points, triangles, outname=args.out_png, title=f'{args.shape}, h0={args.h0:g}')
        logger.info('wrote %s', args.out_png)
    return 0


__all__ = ['main', 'build_domain', 'build_parser']
