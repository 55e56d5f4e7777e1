from __future__ import annotations

import importlib
import sys
import threading
import traceback
import types
from pathlib import Path

import pydantic as p

import bulletin
import bulletin.lib.cli as click
from bulletin.core import BulletinContainer
from bulletin.grading import GradingError, InvalidInputError
from bulletin.model import DeploymentEnvironment

_BulletinRoot = Path(bulletin.__file__).resolve().parents[1]

# command modules are imported lazily and wired once the container boots
_commands = ("report", "schema")
_wiring: list[types.ModuleType] = []


class BulletinMultiCommand(click.Group):
    def list_commands(self, ctx: click.Context) -> list[str]:
        return list(_commands)

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        if cmd_name not in _commands:
            return None
        mod = importlib.import_module(f"bulletin.cli.{cmd_name}")
        _wiring.append(mod)
        return getattr(mod, cmd_name)


@click.group(cls=BulletinMultiCommand)
@click.option("-E", "--env", default=DeploymentEnvironment.Local, type=click.EnumType(DeploymentEnvironment))
@click.option(
    "-c",
    "--config-root",
    default=_BulletinRoot / "config",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="directory holding the YAML configuration",
)
@click.option(
    "-o",
    "--override",
    multiple=True,
    help="configuration path parameter-value pairs to override config with, e.g., -o grading.precision=1",
)
@click.option("-D", "--debug", is_flag=True, default=False)
@click.pass_obj
def main(ct: BulletinContainer, env: DeploymentEnvironment, config_root: Path, override: tuple[str, ...], debug: bool):
    BulletinContainer.boot(
        ct,
        debug=debug,
        env=env,
        config_root=p.FileUrl(f"file://{config_root.absolute()}"),
        override=override,
        wiring=tuple(_wiring),
    )


def _exit_code(ex: Exception) -> int:
    match ex:
        case InvalidInputError():
            return 2
        case GradingError():
            return 3
    return 1


def execute_command(*_args: str) -> None:
    threading.current_thread().name = "bulletin-0"
    args = list(_args or sys.argv)

    # Strip away full path to fix program name in help message
    args[0] = Path(args[0]).name
    container = BulletinContainer()
    debug = "-D" in args[1:] or "--debug" in args[1:]

    try:
        with main.make_context(args[0], args=args[1:]) as ctx:
            ctx.obj = container
            main.invoke(ctx)
    except (EOFError, KeyboardInterrupt, click.Abort):
        click.echo("Aborted!", file=sys.stderr)
        sys.exit(1)
    except click.exceptions.Exit as ex:
        sys.exit(ex.exit_code)
    except click.ClickException as ex:
        ex.show()
        sys.exit(ex.exit_code)
    except Exception as ex:
        click.echo(click.style("ERROR ", fg="red"), nl=False, file=sys.stderr)
        click.echo(str(ex), file=sys.stderr)
        # grading errors are user-facing, anything else is a bug worth a traceback
        if debug or not isinstance(ex, GradingError):
            traceback.print_exc()
        sys.exit(_exit_code(ex))
    finally:
        container.shutdown_resources()


if __name__ == "__main__":
    execute_command(*sys.argv)
