"""Click CLI commands for heightmap conversion."""

import logging

import click
from tqdm import tqdm

from .builder import BrickBuilder
from .constants import OWNER_ID, OWNER_NAME
from .errors import BrickmapError
from .models import GenOptions

logger = logging.getLogger(__name__)


@click.group()
@click.option('--quiet', '-q', is_flag=True, help='Only log warnings and errors')
def cli(quiet: bool):
    """Convert heightmap PNG images into brick saves."""
    logging.basicConfig(level=logging.WARNING if quiet else logging.INFO,
                        format='%(message)s')


@cli.command()
@click.argument('inputs', nargs=-1, required=True)
@click.option('--output', '-o', default='./out.brs.json', help='Output save file')
@click.option('--colormap', '-c', default=None, help='Input colormap PNG image')
@click.option('--vertical', '-v', default=1, type=int, help='Vertical scale multiplier')
@click.option('--size', '-s', default=1, type=click.IntRange(min=1), help='Brick stud size')
@click.option('--cull', is_flag=True,
              help='Remove bottom level bricks and fully transparent bricks')
@click.option('--tile', is_flag=True, help='Render bricks as tiles')
@click.option('--micro', is_flag=True, help='Render bricks as micro bricks')
@click.option('--stud', is_flag=True, help='Render bricks as stud cubes')
@click.option('--snap', is_flag=True, help='Snap bricks to the brick grid')
@click.option('--lrgb', is_flag=True, help='Use linear rgb input color instead of sRGB')
@click.option('--img', '-i', is_flag=True, help='Make the heightmap flat and render an image')
@click.option('--glow', is_flag=True, help='Make the heightmap glow at 0 intensity')
@click.option('--hdmap', is_flag=True, help='Using a high detail rgb color encoded heightmap')
@click.option('--nocollide', is_flag=True, help='Disable brick collision')
@click.option('--no-quadtree', is_flag=True, help='Skip power-of-two quad merging')
@click.option('--layers', default=0, type=int,
              help='Give every elevation above this its own layer (0 disables)')
@click.option('--owner-id', default=OWNER_ID, help='Owner id (UUID)')
@click.option('--owner', default=OWNER_NAME, help='Owner name')
@click.option('--preview', default=None, help='Also write a GLB/PLY/STL preview mesh')
def convert(inputs, output, colormap, vertical, size, cull, tile, micro, stud,
            snap, lrgb, img, glow, hdmap, nocollide, no_quadtree, layers,
            owner_id, owner, preview):
    """Convert INPUTS heightmap images into a brick save."""
    options = GenOptions.from_cli(
        studs=size, tile=tile, micro=micro, stud=stud,
        scale=vertical, cull=cull, snap=snap, img=img, glow=glow,
        hdmap=hdmap, lrgb=lrgb, nocollide=nocollide,
        quadtree=not no_quadtree, layer_threshold=layers,
    )
    builder = BrickBuilder(options, owner_id=owner_id, owner_name=owner)

    try:
        with tqdm(total=100, desc="Generating", unit="%") as bar:
            def _progress(fraction: float) -> bool:
                bar.update(round(fraction * 100) - bar.n)
                return True

            result = builder.run(list(inputs), output, colormap_file=colormap,
                                 preview_path=preview, progress_callback=_progress)
    except BrickmapError as e:
        logger.error(f"Error converting heightmap: {e}")
        raise click.ClickException(str(e))

    click.echo(f"Wrote {result['bricks']} bricks to {result['save_path']}")
    if 'preview_path' in result:
        click.echo(f"Preview: {result['preview_path']}")


def main():
    cli()


if __name__ == '__main__':
    main()
