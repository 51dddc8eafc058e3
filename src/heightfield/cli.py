"""Command-line interface for the height-field water simulator."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

app = typer.Typer(
    name="heightfield",
    help="Height-field water simulator with buoyancy coupling",
    add_completion=False,
)
console = Console()


@app.command()
def info():
    """Show the configured grid and parameters."""
    from heightfield.core.config import get_settings
    from heightfield.simulation.surface import WaterSurface
    from heightfield.simulation.wave_step import stable_wave_speed

    settings = get_settings()
    surface = WaterSurface.from_settings(settings)
    dt = settings.simulation.dt

    console.print(Panel.fit(
        f"[bold]Water Surface[/bold]\n"
        f"Grid: {surface.num_x} x {surface.num_z} ({surface.num_cells} cells)\n"
        f"Spacing: {surface.spacing:g}"
    ))

    table = Table(title="Parameters")
    table.add_column("Property")
    table.add_column("Value")
    table.add_row("Depth", f"{settings.grid.depth:g}")
    table.add_row("Wave speed", f"{settings.wave.wave_speed:g}")
    table.add_row("Wave speed at dt", f"{stable_wave_speed(surface.wave_speed, surface.spacing, dt):.3f}")
    table.add_row("Position damping", f"{settings.wave.pos_damping:g}")
    table.add_row("Velocity damping", f"{settings.wave.vel_damping:g}")
    table.add_row("Alpha", f"{settings.coupling.alpha:g}")
    table.add_row("Gravity", f"{settings.coupling.gravity_y:g}")
    table.add_row("Timestep", f"{dt:.4g} s")
    console.print(table)


@app.command()
def simulate(
    steps: Annotated[Optional[int], typer.Option(help="Number of ticks")] = None,
    dt: Annotated[Optional[float], typer.Option(help="Timestep in seconds")] = None,
    ball: Annotated[bool, typer.Option(help="Drop a ball into the water")] = False,
    ball_radius: Annotated[float, typer.Option(help="Ball radius")] = 0.3,
    ball_height: Annotated[float, typer.Option(help="Ball drop height")] = 2.0,
    disturb: Annotated[float, typer.Option(help="Raise the centre column by this amount")] = 0.0,
    coupling: Annotated[bool, typer.Option(help="Enable body coupling")] = True,
    output: Annotated[Optional[Path], typer.Option(help="Output JSON file")] = None,
    plot: Annotated[Optional[Path], typer.Option(help="Save final surface plot (PNG)")] = None,
    verbose: Annotated[bool, typer.Option(help="Log every clamp and coupling step")] = False,
):
    """Run the water simulation."""
    from heightfield.core.config import get_settings
    from heightfield.simulation.bodies import Ball
    from heightfield.simulation.runner import SimulationRunner

    settings = get_settings()
    if verbose or settings.debug:
        logging.basicConfig(level=logging.DEBUG)

    runner = SimulationRunner(settings=settings, log_fn=console.print)

    if ball:
        runner.bodies.append(Ball(position=(0.0, ball_height, 0.0), radius=ball_radius))

    if disturb:
        ci, cj = runner.surface.field.center
        runner.disturb(ci, cj, disturb)

    console.print("[bold]Running simulation...[/bold]")
    result = runner.run(n_steps=steps, dt=dt, coupling=coupling)

    table = Table(title="Simulation Results")
    table.add_column("Metric")
    table.add_column("Value")
    table.add_row("Duration", f"{result.duration_seconds:.2f} s ({result.n_steps} steps)")
    table.add_row("Wave speed used", f"{result.wave_speed_used:.3f}")
    table.add_row("Final height range", f"{result.min_height[-1]:.4f} - {result.max_height[-1]:.4f}")
    table.add_row("Volume drift", f"{result.volume_drift * 100:.4f}%")
    for n, y in enumerate(result.body_y):
        table.add_row(f"Ball {n} height", f"{y:.3f}")
    console.print(table)

    if output:
        result.save(output)
        console.print(f"[green]Results saved to {output}[/green]")

    if plot:
        from heightfield.viz.plots import plot_height_field

        plot_height_field(runner.surface, bodies=runner.bodies, save_path=plot)
        console.print(f"[green]Surface plot saved to {plot}[/green]")


@app.command()
def version():
    """Show version information."""
    from heightfield import __version__
    console.print(f"heightfield v{__version__}")


if __name__ == "__main__":
    app()
