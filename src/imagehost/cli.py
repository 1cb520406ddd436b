"""CLI for the GitHub image host."""

import logging
from pathlib import Path
from typing import NoReturn

import click

from .client import GitHubImageHost
from .config import default_config_path, load_config, merge_config, save_config
from .transport import HttpxTransport

logger = logging.getLogger(__name__)


def setup_logging(verbose: int) -> None:
    """Setup logging."""
    level = logging.DEBUG if verbose >= 2 else logging.INFO if verbose == 1 else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def fail(message: str) -> NoReturn:
    """Print an error and exit with status 1."""
    click.echo(f"Error: {message}", err=True)
    raise SystemExit(1)


@click.group()
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path), help="Config file")
@click.option("--token", help="GitHub personal access token (default: GH_TOKEN, then GITHUB_TOKEN)")
@click.option("--owner", help="Repository owner")
@click.option("--repo", help="Repository name")
@click.option("--timeout", type=float, default=30.0, show_default=True, help="Request timeout")
@click.option("--retries", "-r", type=int, default=1, show_default=True, help="Connection attempts")
@click.option("-v", "--verbose", count=True, help="Verbosity (-v, -vv)")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Path | None,
    token: str | None,
    owner: str | None,
    repo: str | None,
    timeout: float,
    retries: int,
    verbose: int,
) -> None:
    """Store images in a GitHub repository."""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    path = config_path or default_config_path()
    try:
        stored = load_config(path)
    except ValueError as e:
        fail(f"Invalid config file {path}: {e}")
    config = merge_config(stored, token=token, owner=owner, repo=repo)
    ctx.obj["config_path"] = path
    ctx.obj["config"] = config
    # Only explicitly passed values are persisted
    ctx.obj["persisted"] = merge_config(stored, token=token, owner=owner, repo=repo, from_env=False)
    if "host" not in ctx.obj:
        ctx.obj["host"] = GitHubImageHost(
            config, transport=HttpxTransport(timeout=timeout, max_retries=retries)
        )
    else:
        ctx.obj["host"].configure(config)


@cli.command()
@click.pass_context
def configure(ctx):
    """Write explicitly passed token/owner/repo to the config file."""
    save_config(ctx.obj["config_path"], ctx.obj["persisted"])
    click.echo(f"Saved {ctx.obj['config_path']}")


@cli.command()
@click.pass_context
def check(ctx):
    """Validate the configuration against GitHub."""
    host = ctx.obj["host"]
    ok, message = host.validate_config(ctx.obj["config"])
    click.echo(message)
    if not ok:
        raise SystemExit(1)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-p", "--path", "dest", help="Destination path in repository (default: file name)")
@click.pass_context
def upload(ctx, file, dest):
    """Upload FILE and print its download URL."""
    host = ctx.obj["host"]
    url, message = host.create(file.read_bytes(), dest or file.name)
    if not url:
        fail(message)
    click.echo(url)


@cli.command()
@click.argument("url")
@click.pass_context
def delete(ctx, url):
    """Delete an image previously uploaded to this host."""
    host = ctx.obj["host"]
    if not host.owns_url(url):
        fail("URL is not owned by this image host")
    ok, message = host.remove(url)
    if not ok:
        fail(message)
    click.echo(f"Deleted {url}")


@cli.command()
@click.argument("url")
@click.pass_context
def owns(ctx, url):
    """Tell whether URL belongs to this host."""
    click.echo("yes" if ctx.obj["host"].owns_url(url) else "no")


if __name__ == "__main__":
    cli()
