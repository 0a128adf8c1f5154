"""
Command-line interface for shapemaze.

Provides tools to generate a single shaped maze and to run batch checks of
the generator's guarantees.
"""

import sys
from collections import Counter

import click
from pydantic import ValidationError

from shapemaze.config import MazeConfig
from shapemaze.core import ShapedMaze
from shapemaze.geometry.mazes import ShapeKind
from shapemaze.utils.exceptions import MazeError
from shapemaze.utils.maze_logging import configure_logging

SHAPE_CHOICES = [kind.value for kind in ShapeKind]


@click.group()
@click.version_option(package_name="shapemaze", prog_name="shapemaze")
def main():
    """
    shapemaze: procedural mazes inside organic shapes.

    Generates blob, parabola, heart, spiral, random and donut shaped mazes
    that are always fully reachable and solvable.
    """


@main.command()
@click.option("--width", "-w", type=int, default=640, help="Board width in pixels")
@click.option("--height", "-h", type=int, default=480, help="Board height in pixels")
@click.option("--target", "-t", type=int, default=400, help="Target cell count (0 = whole board)")
@click.option("--cell-size", type=int, default=16, help="Pixels per cell")
@click.option("--seed", "-s", type=int, default=None, help="Random seed")
@click.option("--shape", type=click.Choice(SHAPE_CHOICES), default=None, help="Force a shape kind")
@click.option("--show", is_flag=True, help="Print the maze as ASCII art")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def generate(width, height, target, cell_size, seed, shape, show, verbose):
    """
    Generate one maze and print its report.

    Examples:
        shapemaze generate --seed 7 --show
        shapemaze generate -w 320 -h 320 -t 120 --shape heart --show
    """
    configure_logging(level="DEBUG" if verbose else "WARNING")

    try:
        config = MazeConfig(cell_size=cell_size, seed=seed)
        maze = ShapedMaze(width, height, target, config=config, kind=shape)
    except (MazeError, ValidationError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    report = maze.report
    verification = maze.verify()

    click.echo(f"{'=' * 50}")
    click.echo("Maze Summary")
    click.echo(f"{'=' * 50}")
    click.echo(f"Grid: {maze.cols}x{maze.rows}")
    click.echo(f"Shape: {report.shape_kind.value} (radius {report.radius:.2f})")
    click.echo(
        f"Cells: {report.final_shape_cells} (target {report.target_count}, "
        f"generated {report.raw_shape_cells}, normalized {report.normalized_shape_cells})"
    )
    click.echo(f"Start: ({maze.start.x}, {maze.start.y})  End: ({maze.end.x}, {maze.end.y})")
    click.echo(f"Endpoint distance: {report.final_distance} (required {report.min_distance})")
    click.echo(f"Fallbacks: {', '.join(report.fallbacks) if report.fallbacks else 'none'}")
    click.echo(f"Valid: {verification['is_valid']}  Perfect: {verification['is_perfect']}")

    if show:
        click.echo()
        click.echo(maze.to_text())

    if not verification["is_valid"]:
        sys.exit(1)


@main.command()
@click.option("--count", "-n", type=int, default=100, help="Number of mazes to generate")
@click.option("--width", "-w", type=int, default=640, help="Board width in pixels")
@click.option("--height", "-h", type=int, default=480, help="Board height in pixels")
@click.option("--target", "-t", type=int, default=400, help="Target cell count (0 = whole board)")
@click.option("--seed", "-s", type=int, default=0, help="Seed of the first maze; maze i uses seed + i")
def check(count, width, height, target, seed):
    """
    Generate many mazes and report invalid ones and fallback frequencies.

    Exits with status 1 if any maze violates a structural guarantee.

    Examples:
        shapemaze check -n 500
        shapemaze check -n 50 -w 160 -h 160 -t 20
    """
    configure_logging(level="ERROR")

    failures = []
    fallback_counts: Counter[str] = Counter()
    below_floor = 0

    with click.progressbar(range(count), label="Generating mazes") as seeds:
        for i in seeds:
            maze = ShapedMaze(width, height, target, config=MazeConfig(seed=seed + i))
            verification = maze.verify()
            if not verification["is_valid"]:
                failures.append((seed + i, verification))
            fallback_counts.update(maze.report.fallbacks)
            if maze.report.final_distance < maze.report.min_distance:
                below_floor += 1

    click.echo(f"\n{'=' * 50}")
    click.echo(f"Checked {count} mazes: {count - len(failures)} valid, {len(failures)} invalid")
    click.echo(f"Below distance floor (best effort): {below_floor}")
    click.echo("Fallbacks fired:")
    if fallback_counts:
        for name, times in fallback_counts.most_common():
            click.echo(f"  {name}: {times}")
    else:
        click.echo("  none")

    for failed_seed, verification in failures:
        broken = [key for key, value in verification.items() if value is False]
        click.echo(f"  seed {failed_seed}: {', '.join(broken)}", err=True)

    if failures:
        sys.exit(1)


if __name__ == "__main__":
    main()
