"""Perch CLI.

Command-line tools for inspecting overlay placement: resolve a placement
from raw numbers, render a preview image, and browse the configuration
catalog.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer

from perch import __version__
from perch.config import settings
from perch.geometry import (
    PlacementRequest,
    PlacementResult,
    PlacementValidator,
    Rect,
    SidePreference,
    Size,
    resolve,
)
from perch.overlay.config import OverlayKind
from perch.utils.logging import configure_logging, get_logger

app = typer.Typer(
    name="perch",
    help="Perch: anchored overlay placement",
    add_completion=False,
)


# =============================================================================
# Commands
# =============================================================================


@app.command()
def version(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show version information."""
    if json_output:
        typer.echo(json.dumps({"version": __version__}))
    else:
        typer.echo(f"perch {__version__}")


@app.command("resolve")
def resolve_command(  # noqa: PLR0913
    trigger: Annotated[
        str, typer.Option("--trigger", "-t", help="Trigger box as X,Y,W,H")
    ],
    overlay: Annotated[str, typer.Option("--overlay", "-o", help="Overlay size W,H")],
    viewport: Annotated[
        str, typer.Option("--viewport", help="Viewport size W,H")
    ] = "1280,800",
    side: Annotated[
        SidePreference, typer.Option("--side", "-s", help="Requested side")
    ] = SidePreference.AUTO,
    margin: Annotated[
        float | None, typer.Option("--margin", "-m", help="Placement margin")
    ] = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity (-v, -vv)"
        ),
    ] = 0,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Resolve where an overlay goes next to a trigger."""
    _configure_logging(verbose)
    logger = get_logger(__name__)

    if margin is not None and margin < 0:
        raise typer.BadParameter(
            f"must be non-negative, got {margin:g}", param_hint="--margin"
        )
    request = PlacementRequest(
        trigger_rect=Rect.from_tuple(_parse_numbers(trigger, 4, "--trigger")),
        overlay_size=Size.from_tuple(_parse_numbers(overlay, 2, "--overlay")),
        side=side,
        viewport=Size.from_tuple(_parse_numbers(viewport, 2, "--viewport")),
        margin=settings.PLACEMENT_MARGIN if margin is None else margin,
    )
    result = resolve(request)
    logger.info("Resolved placement", ready=result.ready, side=_side_value(result))

    if not result.ready:
        if json_output:
            typer.echo(json.dumps({"ready": False}))
        else:
            typer.echo("Placement not ready: a rectangle has zero size")
        raise typer.Exit(1)

    overflow = PlacementValidator().overflow_axes(result, request)
    if json_output:
        typer.echo(
            json.dumps(
                {
                    "ready": True,
                    "side": _side_value(result),
                    "x": result.x,
                    "y": result.y,
                    "overflow": overflow,
                },
                indent=2,
            )
        )
    else:
        typer.echo(f"Side: {_side_value(result)}")
        typer.echo(f"Origin: ({result.x:g}, {result.y:g})")
        if overflow:
            typer.echo(f"Overflow: {', '.join(overflow)} (overlay exceeds viewport)")


@app.command()
def preview(  # noqa: PLR0913
    trigger: Annotated[
        str, typer.Option("--trigger", "-t", help="Trigger box as X,Y,W,H")
    ],
    output: Annotated[
        Path, typer.Option("--output", "-o", help="Where to write the PNG")
    ],
    key: Annotated[
        str | None, typer.Option("--key", "-k", help="Catalog entry to show")
    ] = None,
    title: Annotated[str, typer.Option("--title", help="Overlay title")] = "",
    content: Annotated[
        str, typer.Option("--content", help="Overlay text (ignored with --key)")
    ] = "",
    kind: Annotated[
        OverlayKind, typer.Option("--kind", help="Overlay kind")
    ] = OverlayKind.INFO,
    viewport: Annotated[
        str, typer.Option("--viewport", help="Viewport size W,H")
    ] = "1280,800",
    side: Annotated[
        SidePreference, typer.Option("--side", "-s", help="Requested side")
    ] = SidePreference.AUTO,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity (-v, -vv)"
        ),
    ] = 0,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Render an overlay next to a trigger into a PNG preview."""
    from perch.cli.preview import render_preview  # noqa: PLC0415

    _configure_logging(verbose)
    logger = get_logger(__name__).bind(overlay_id="preview")

    trigger_rect = Rect.from_tuple(_parse_numbers(trigger, 4, "--trigger"))
    viewport_size = Size.from_tuple(_parse_numbers(viewport, 2, "--viewport"))
    if key is None and not (title or content):
        raise typer.BadParameter("Provide --key or --title/--content")

    try:
        result = render_preview(
            trigger_rect=trigger_rect,
            viewport=viewport_size,
            output=output,
            key=key,
            title=title,
            content=content,
            kind=kind,
            side=side,
        )
    except Exception as e:
        logger.exception("Preview failed")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "rendered": result.rendered,
                    "side": result.side,
                    "x": result.x,
                    "y": result.y,
                    "output": str(output),
                },
                indent=2,
            )
        )
    elif result.rendered:
        typer.echo(f"Preview saved to {output} (side: {result.side})")
    else:
        typer.echo("Overlay could not be placed: trigger has zero size", err=True)
    raise typer.Exit(0 if result.rendered else 1)


@app.command()
def catalog(
    key: Annotated[
        str | None, typer.Argument(help="Catalog key to show; omit to list")
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """List catalog keys or show one overlay configuration."""
    from perch.overlay.catalog import catalog_keys, get_config  # noqa: PLC0415

    if key is None:
        keys = catalog_keys()
        if json_output:
            typer.echo(json.dumps(keys))
        else:
            for name in keys:
                typer.echo(name)
        return

    config = get_config(key)
    if json_output:
        typer.echo(config.model_dump_json(indent=2))
    else:
        typer.echo(f"{config.title} [{config.kind.value}]")
        typer.echo(config.content)


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """Perch: anchored overlay placement."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


def _configure_logging(verbose: int) -> None:
    """Configure logging based on verbosity level."""
    if verbose == 0:
        level = "WARNING"
    elif verbose == 1:
        level = "INFO"
    else:  # verbose >= 2
        level = "DEBUG"

    configure_logging(level=level)


def _parse_numbers(raw: str, count: int, option: str) -> tuple[float, ...]:
    """Parse "a,b,..." into exactly ``count`` non-negative-size floats."""
    parts = [part.strip() for part in raw.split(",")]
    if len(parts) != count:
        raise typer.BadParameter(
            f"expected {count} comma-separated numbers, got {raw!r}",
            param_hint=option,
        )
    try:
        values = tuple(float(part) for part in parts)
    except ValueError:
        raise typer.BadParameter(
            f"not a number in {raw!r}", param_hint=option
        ) from None
    # Trailing values are always sizes
    if any(value < 0 for value in values[-2:]):
        raise typer.BadParameter(
            f"width and height must be non-negative in {raw!r}", param_hint=option
        )
    return values


def _side_value(result: PlacementResult) -> str | None:
    return result.side.value if result.side is not None else None


if __name__ == "__main__":  # pragma: no cover
    app()
