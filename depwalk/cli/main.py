"""Click commands for resolving and inspecting dependency graphs.

Every command resolves the full graph of NAME first. Failed lookups below
the root are reported on stderr and make the command exit with status 1
after printing its output, unless ``--allow-partial`` is given. A root that
cannot be fetched is always an error.
"""

from __future__ import annotations

import asyncio

import click

from depwalk import __version__
from depwalk.config import load_config
from depwalk.graph import BuildResult, CycleError, resolve
from depwalk.models.config import DepwalkConfig
from depwalk.observability.logging import setup_logging
from depwalk.source import EopkgSource, MetadataSource, MetadataSourceError


@click.group()
@click.version_option(__version__, prog_name="depwalk")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default=None,
    help="Override DEPWALK_LOG_LEVEL.",
)
@click.option("--allow-partial", is_flag=True, help="Exit 0 even if some lookups failed.")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None, allow_partial: bool) -> None:
    """Resolve transitive runtime dependencies of eopkg packages."""
    ctx.ensure_object(dict)
    config: DepwalkConfig | None = ctx.obj.get("config")
    if config is None:
        try:
            config = load_config()
        except ValueError as exc:
            raise click.ClickException(f"invalid configuration: {exc}") from exc
    setup_logging(log_level or config.log.level, fmt=config.log.fmt)
    ctx.obj["config"] = config
    ctx.obj["allow_partial"] = allow_partial


def _source(ctx: click.Context) -> MetadataSource:
    source = ctx.obj.get("source")
    if source is None:
        cfg = ctx.obj["config"].source
        source = EopkgSource(cfg.eopkg_binary, timeout=cfg.lookup_timeout)
        ctx.obj["source"] = source
    return source


def _build(ctx: click.Context, name: str) -> BuildResult:
    config: DepwalkConfig = ctx.obj["config"]
    try:
        result = asyncio.run(resolve(name, _source(ctx), max_concurrency=config.builder.max_concurrency))
    except MetadataSourceError as exc:
        raise click.ClickException(str(exc)) from exc

    for error in result.errors:
        click.echo(f"warning: {error}", err=True)
    return result


def _finish(ctx: click.Context, result: BuildResult) -> None:
    if not result.ok and not ctx.obj["allow_partial"]:
        ctx.exit(1)


@cli.command()
@click.argument("name")
@click.pass_context
def deps(ctx: click.Context, name: str) -> None:
    """Print every dependency edge in NAME's graph."""
    result = _build(ctx, name)
    graph = result.graph
    for edge in sorted(graph.edges()):
        suffix = "" if graph.has_node(edge.target) else " (missing)"
        click.echo(f"{edge}{suffix}")
    for node in sorted(graph.nodes()):
        if not graph.successors(node):
            click.echo(node)
    _finish(ctx, result)


@cli.command()
@click.argument("name")
@click.pass_context
def order(ctx: click.Context, name: str) -> None:
    """Print NAME's packages in install order, dependencies first."""
    result = _build(ctx, name)
    try:
        ordered = result.graph.topological_order()
    except CycleError as exc:
        raise click.ClickException(str(exc)) from exc
    for package in ordered:
        click.echo(package)
    _finish(ctx, result)


@cli.command()
@click.argument("name")
@click.pass_context
def cycles(ctx: click.Context, name: str) -> None:
    """Print each dependency cycle reachable from NAME."""
    result = _build(ctx, name)
    found = result.graph.find_cycles()
    for cycle in found:
        click.echo(" ".join(cycle))
    if not found:
        click.echo("no cycles found", err=True)
    _finish(ctx, result)


@cli.command()
@click.argument("name")
@click.argument("target")
@click.option("--direct", is_flag=True, help="Only packages that list TARGET themselves.")
@click.pass_context
def rdeps(ctx: click.Context, name: str, target: str, direct: bool) -> None:
    """Print packages in NAME's graph that depend on TARGET."""
    result = _build(ctx, name)
    for package in sorted(result.graph.reverse_dependencies(target, transitive=not direct)):
        click.echo(package)
    _finish(ctx, result)
