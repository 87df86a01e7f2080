"""Click CLI commands for halfpipe."""

import logging

import click
import numpy as np

from .constants import (
    TRACK_SEED, TRACK_SEGMENTS, TRACK_RADIUS, TRACK_SEGMENT_LENGTH,
    DEFAULT_SUBDIVISIONS,
)
from .level import build_level
from .models import HalfCylinder, HalfCylinderPath, HalfpipeError
from .shapes import half_cylinder
from .vecmath import triangle_normals

logger = logging.getLogger(__name__)


def _track_options(f):
    f = click.option('--seed', default=TRACK_SEED, show_default=True, type=int,
                     help='Random walk seed')(f)
    f = click.option('--segments', default=TRACK_SEGMENTS, show_default=True, type=int,
                     help='Number of track segments')(f)
    f = click.option('--subdivisions', default=DEFAULT_SUBDIVISIONS, show_default=True,
                     type=int, help='Quads across the half-pipe')(f)
    f = click.option('--radius', default=TRACK_RADIUS, show_default=True, type=float,
                     help='Half-pipe radius')(f)
    f = click.option('--segment-length', default=TRACK_SEGMENT_LENGTH, show_default=True,
                     type=float, help='Length of each segment')(f)
    return f


def _config(seed, segments, subdivisions, radius, segment_length) -> HalfCylinderPath:
    try:
        return HalfCylinderPath(seed=seed, n_segments=segments,
                                subdivisions=subdivisions, radius=radius,
                                segment_length=segment_length)
    except HalfpipeError as e:
        raise click.BadParameter(str(e))


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def cli(verbose: bool):
    """Procedural half-pipe track generator."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")


@cli.command()
@_track_options
@click.option('--output', '-o', default='track.glb', help='Output mesh file (glb, ply, stl, obj)')
def build(seed, segments, subdivisions, radius, segment_length, output):
    """Build the swept track and its collider, then export the mesh."""
    config = _config(seed, segments, subdivisions, radius, segment_length)
    try:
        level = build_level(config)
        path = level.mesh.export(output)
    except Exception as e:
        logger.error(f"Error building track: {e}")
        raise click.ClickException(str(e))
    click.echo(f"Wrote {level.mesh.triangle_count} triangles to {path}")


@cli.command()
@click.option('--scale', '-s', default=1.0, show_default=True, help='Uniform scale factor')
@click.option('--output', '-o', default='half_cylinder.glb', help='Output mesh file')
def primitive(scale: float, output: str):
    """Export the straight half-cylinder primitive."""
    try:
        mesh = half_cylinder(HalfCylinder.from_scale(scale))
        path = mesh.export(output)
    except Exception as e:
        logger.error(f"Error building primitive: {e}")
        raise click.ClickException(str(e))
    click.echo(f"Wrote {mesh.triangle_count} triangles to {path}")


@cli.command()
@_track_options
def stats(seed, segments, subdivisions, radius, segment_length):
    """Print vertex/triangle counts and bounds without writing a file."""
    config = _config(seed, segments, subdivisions, radius, segment_length)
    try:
        level = build_level(config)
    except Exception as e:
        logger.error(f"Error building track: {e}")
        raise click.ClickException(str(e))

    mesh = level.mesh
    lo = mesh.positions.min(axis=0)
    hi = mesh.positions.max(axis=0)
    faces = mesh.faces.astype(np.int64)
    agree = 0
    if len(faces):
        face_n = triangle_normals(mesh.positions, faces)
        vert_n = mesh.normals[faces].sum(axis=1)
        agree = int((np.einsum('ij,ij->i', face_n, vert_n) > 0).sum())

    click.echo(f"seed:       {config.seed}")
    click.echo(f"vertices:   {mesh.vertex_count}")
    click.echo(f"triangles:  {mesh.triangle_count}")
    click.echo(f"collider:   {level.collider.triangle_count} triangles")
    click.echo(f"facing:     {agree}/{mesh.triangle_count} agree with vertex normals")
    click.echo(f"bounds min: ({lo[0]:.2f}, {lo[1]:.2f}, {lo[2]:.2f})")
    click.echo(f"bounds max: ({hi[0]:.2f}, {hi[1]:.2f}, {hi[2]:.2f})")
