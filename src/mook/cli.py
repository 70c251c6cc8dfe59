"""
mook CLI - Main entry point for the mook command

Diagnostics for the interception engine: shows how a member of an importable
object would be resolved and hooked.
"""

import importlib
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import click

from . import __version__
from .config import Config, load_config
from .core.resolution import analyze_member


def resolve_target(path: str) -> Any:
    """Import ``package.module[.Attr...]`` and return the object it names."""
    parts = path.split(".")
    for split in range(len(parts), 0, -1):
        module_name = ".".join(parts[:split])
        try:
            obj = importlib.import_module(module_name)
        except ImportError:
            continue
        for attr in parts[split:]:
            obj = getattr(obj, attr)
        return obj
    raise ImportError(f"No module found for {path!r}")


@click.group()
@click.version_option(version=__version__, prog_name="mook")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config: Optional[Path], debug: bool):
    """mook - hook any member of any Python object"""
    ctx.ensure_object(dict)

    if config:
        ctx.obj["config"] = load_config(config)
    else:
        ctx.obj["config"] = Config.get_instance()

    if debug:
        Config.set("debug", True)
        Config.set("log_level", "DEBUG")

    logging.basicConfig(
        level=Config.get_log_level(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@cli.command("inspect")
@click.argument("target")
@click.argument("member")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def inspect_member(target: str, member: str, output_json: bool):
    """Show how MEMBER of the importable TARGET is resolved"""
    # Add current directory to Python path
    cwd = str(Path.cwd())
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    try:
        obj = resolve_target(target)
    except (ImportError, AttributeError) as e:
        click.echo(f"❌ Cannot resolve {target}: {e}", err=True)
        sys.exit(1)

    info = analyze_member(obj, member).describe()

    if output_json:
        click.echo(json.dumps(info, indent=2))
        return

    click.echo(f"🔍 {info['target']}.{member}")
    if info["ownership"] == "absent":
        click.echo("   📭 Not defined; hooking installs it, unhooking removes it again")
    elif info["ownership"] == "own":
        click.echo(f"   📍 Own member of {info['owner']}")
    else:
        click.echo(f"   🧬 Inherited from {info['owner']}")

    if info["callable"]:
        click.echo(f"   📞 Callable, {info['arity']} positional parameter(s)")
    elif info["accessor"]:
        click.echo("   🔁 Computed by an accessor, re-read on every access")
    elif info["ownership"] != "absent":
        click.echo("   📦 Plain value")
    click.echo(f"   🪝 Active hooks: {info['depth']}")


@cli.command()
def version():
    """Show version information."""
    click.echo(f"mook v{__version__}")
    click.echo("   Hook any member of any Python object, and unhook it again")


if __name__ == "__main__":
    cli()
