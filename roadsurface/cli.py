"""Click CLI commands for roadsurface."""

import logging
from typing import Optional

import click
import numpy as np

from . import constants
from .export import export_mesh
from .models import GeometryConfig
from .surface import SurfaceGenerator
from .tracks import demo_tracks, load_tracks, random_tracks

logger = logging.getLogger(__name__)


def _geometry_options(func):
    options = [
        click.option('--sample-distance', '--ds', type=float, default=None,
                     help='Track sample spacing in meters'),
        click.option('--track-width', type=float, default=None,
                     help='Distance between the wheel tracks in meters'),
        click.option('--lane-width', type=float, default=None,
                     help='Total road width in meters'),
        click.option('--subdivisions', '-s', type=int, default=None,
                     help='Length subdivisions (upsampling factor)'),
        click.option('--roughness', type=float, default=None,
                     help='Per-vertex jitter amplitude in meters'),
        click.option('--boundary', type=click.Choice(constants.BOUNDARY_MODES),
                     default='zero', help='Grid edge handling'),
        click.option('--normals', type=click.Choice(constants.NORMAL_MODES),
                     default='legacy', help='Vertex normal rule'),
        click.option('--index-dtype', type=click.Choice(list(constants.INDEX_LIMITS)),
                     default='uint16', help='Triangle index width'),
        click.option('--tracks', 'tracks_path', type=click.Path(dir_okay=False),
                     default=None, help='CSV/JSON file with left and right tracks'),
        click.option('--random', 'random_samples', type=int, default=None,
                     help='Generate a random track pair with this many samples'),
        click.option('--seed', type=int, default=None,
                     help='Seed for random tracks and roughness jitter'),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build(sample_distance, track_width, lane_width, subdivisions, roughness,
           boundary, normals, index_dtype, tracks_path, random_samples, seed):
    config = GeometryConfig.from_env(
        sample_distance=sample_distance,
        track_width=track_width,
        lane_width=lane_width,
        length_subdivisions=subdivisions,
        roughness=roughness,
        boundary_mode=boundary,
        normal_mode=normals,
        index_dtype=index_dtype,
    )
    rng = np.random.default_rng(seed)
    if tracks_path:
        left, right = load_tracks(tracks_path)
    elif random_samples is not None:
        left, right = random_tracks(random_samples, rng,
                                    sample_distance=config.sample_distance)
    else:
        left, right = demo_tracks()
    generator = SurfaceGenerator(config)
    return generator, left, right, rng


@click.group()
@click.option('--log-level', default=constants.LOG_LEVEL, show_default=True,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                                case_sensitive=False))
def cli(log_level: str):
    """Generate triangulated road surfaces from wheel-track profiles."""
    logging.basicConfig(level=log_level.upper(),
                        format='%(asctime)s - %(levelname)s - %(message)s')


@cli.command()
@_geometry_options
@click.option('--output', '-o', default=None,
              help='Output mesh path (.glb, .ply, .obj, .stl)')
@click.option('--no-center', is_flag=True, help='Keep the road origin at (0, 0, 0)')
def generate(output: Optional[str], no_center: bool, **kwargs):
    """Build a road surface mesh and write it to a file."""
    if output is None:
        output = str(constants.OUTPUT_DIR / "road_surface.glb")
    try:
        generator, left, right, rng = _build(**kwargs)
        mesh = generator.generate(left, right, rng)
        path = export_mesh(mesh, output, centered=not no_center)
    except (ValueError, OSError) as e:
        logger.error(f"Error generating road surface: {e}")
        raise click.ClickException(str(e))
    click.echo(f"Wrote {path} ({mesh.vertex_count} vertices, "
               f"{mesh.triangle_count} triangles)")


@cli.command()
@_geometry_options
def info(**kwargs):
    """Report grid dimensions for a configuration without building it."""
    try:
        generator, left, right, _rng = _build(**kwargs)
        layout = generator.layout_for(left, right)
    except (ValueError, OSError) as e:
        logger.error(f"Invalid configuration: {e}")
        raise click.ClickException(str(e))

    click.echo(f"Track samples:    {layout.in_n}")
    click.echo(f"Track width:      {layout.track_width:.4f} m (snapped)")
    click.echo(f"Lane width:       {layout.lane_width:.4f} m (snapped)")
    click.echo(f"Road length:      {layout.road_length:.4f} m")
    click.echo(f"Source grid:      {layout.in_n} x {layout.in_m}")
    click.echo(f"Dense grid:       {layout.n} x {layout.m} "
               f"(outer {layout.outer_m}, inner {layout.inner_m})")
    click.echo(f"Track columns:    {layout.l_track}, {layout.r_track}")
    click.echo(f"Vertices:         {layout.vertex_count}")
    click.echo(f"Triangles:        {2 * (layout.n - 1) * (layout.m - 1)}")


def main():
    cli()


if __name__ == "__main__":
    main()
