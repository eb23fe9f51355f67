import logging
import sys
from pathlib import Path

import click

from .casefile import CaseFile, skeleton_case
from .errors import LspressoError
from .kinds import KINDS, RequestKind
from .utils.config import get_config_path, load_config

CLI_HELP = """lspresso-shot runs language server test cases inside a headless Neovim.

A case file (TOML) names the request kind, the server command, the source
files and the expected reply. `lspresso-shot new` writes a skeleton to start
from, `lspresso-shot run` executes cases and prints a diff for every failure.

See `lspresso-shot COMMAND --help` for more documentation and command-specific options.
"""


class OrderedGroup(click.Group):
    def __init__(self, *args, commands_order: list[str] | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.commands_order = commands_order or []

    def list_commands(self, ctx):
        commands = super().list_commands(ctx)
        if self.commands_order:
            ordered = [c for c in self.commands_order if c in commands]
            remaining = [c for c in commands if c not in self.commands_order]
            return ordered + remaining
        return commands


def configure_logging(verbose: bool) -> None:
    if verbose:
        level = logging.DEBUG
    else:
        name = str(load_config()["log"]["level"]).upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            raise click.ClickException(f"Unknown log level in config: {name}")

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def load_case(path: str) -> CaseFile:
    try:
        return CaseFile.load(path)
    except LspressoError as e:
        raise click.ClickException(str(e))


def parse_kind(ctx, param, value):
    if value is None:
        return None
    try:
        return RequestKind.from_name(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


@click.group(
    cls=OrderedGroup,
    commands_order=["run", "script", "new", "kinds", "config"],
    help=CLI_HELP,
    context_settings={"help_option_names": ["-h", "--help"], "max_content_width": 120},
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx, verbose):
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(verbose)


@cli.command("run")
@click.argument("case_files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("-x", "--exitfirst", is_flag=True, help="Stop after the first failing case")
@click.pass_context
def run(ctx, case_files, exitfirst):
    """Run one or more case files.

    Prints `ok` or `FAIL` per case, followed by the failure report. Exits
    with status 1 if any case failed.
    """
    failures = 0
    for path in case_files:
        try:
            case_file = CaseFile.load(path)
            case_file.run()
        except LspressoError as e:
            failures += 1
            click.echo(f"{click.style('FAIL', fg='red')} {path}")
            click.echo(str(e))
            if exitfirst:
                break
        else:
            click.echo(f"{click.style('ok', fg='green')} {path}")

    if len(case_files) > 1:
        click.echo(f"\n{len(case_files) - failures} passed, {failures} failed")
    if failures:
        ctx.exit(1)


@cli.command("script")
@click.argument("case_file", type=click.Path(exists=True, dir_okay=False))
def script(case_file):
    """Print the Neovim init script a case file would run."""
    case = load_case(case_file)
    try:
        click.echo(case.script(), nl=False)
    except LspressoError as e:
        raise click.ClickException(str(e))


@cli.command("new")
@click.argument("path", type=click.Path(dir_okay=False))
@click.option("--kind", required=True, callback=parse_kind, help="Request kind, e.g. hover or type_definition")
@click.option("--server", required=True, help="Language server command or path")
@click.option("--source", default="main.txt", show_default=True, help="Path of the source file inside the workspace")
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def new(path, kind, server, source, force):
    """Write a skeleton case file."""
    target = Path(path)
    if target.exists() and not force:
        raise click.ClickException(f"{target} already exists (use --force to overwrite)")
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(skeleton_case(kind, server, source))
    click.echo(f"Wrote {kind.slug} case to {target}")


@cli.command("kinds")
def kinds():
    """List the supported request kinds."""
    width = max(len(kind.slug) for kind in KINDS)
    for kind, spec in KINDS.items():
        cursor = "  (cursor)" if spec.needs_cursor else ""
        click.echo(f"{kind.slug.ljust(width)}  {kind.method}{cursor}")


@cli.command()
def config():
    """Print config file location and contents."""
    config_path = get_config_path()
    click.echo(f"Config file: {config_path}")
    click.echo()

    if config_path.exists():
        click.echo(config_path.read_text())
    else:
        click.echo("(file does not exist, using defaults)")
