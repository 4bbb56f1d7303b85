import asyncio
import json
from typing import NoReturn

import click
import typer
from botocore.exceptions import BotoCoreError, ClientError
from dotenv import load_dotenv

from verified_users import __version__
from verified_users.config import ConfigError, load_config
from verified_users.logging_utils import configure_logging
from verified_users.schema import MalformedUserError
from verified_users.store import UserStore


def run(argv: list[str]) -> int:
    app = typer.Typer(
        add_completion=False,
        help="Look up verified users in the DynamoDB users table",
        invoke_without_command=True,
        no_args_is_help=True,
    )

    def _die(msg: str, code: int = 2) -> NoReturn:
        typer.echo(f"ERROR: {msg}", err=True)
        raise typer.Exit(code=code)

    def _config(ctx: typer.Context):
        try:
            return load_config(region=ctx.obj.get("region"), table_name=ctx.obj.get("table"))
        except ConfigError as e:
            _die(str(e), code=2)

    def _store(ctx: typer.Context) -> UserStore:
        return UserStore.from_config(_config(ctx))

    @app.callback()
    def _root(
        ctx: typer.Context,
        region: str | None = typer.Option(None, "--region", help="AWS region override"),
        table: str | None = typer.Option(None, "--table", help="Users table override"),
        env_file: str | None = typer.Option(None, "--env-file", help="Load environment from this dotenv file"),
        verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Debug logging"),
        version: bool = typer.Option(False, "--version", help="Print version and exit"),
    ) -> None:
        if version:
            typer.echo(__version__)
            raise typer.Exit(code=0)
        if env_file:
            load_dotenv(env_file)
        configure_logging(verbose)
        ctx.obj = {"region": region, "table": table}

    @app.command("get-user")
    def get_user(ctx: typer.Context, discord_id: str = typer.Argument(..., help="Discord user id")) -> None:
        """Print the user record as JSON."""
        user = asyncio.run(_store(ctx).get_user(discord_id))
        if user is None:
            typer.echo(f"not found: {discord_id}", err=True)
            raise typer.Exit(code=1)
        typer.echo(json.dumps(user.to_dict(), indent=2, sort_keys=True))

    @app.command("exists")
    def exists(ctx: typer.Context, discord_id: str = typer.Argument(..., help="Discord user id")) -> None:
        """Print true/false; exit 1 when the user is not registered."""
        found = asyncio.run(_store(ctx).user_exists(discord_id))
        typer.echo("true" if found else "false")
        if not found:
            raise typer.Exit(code=1)

    cfg_app = typer.Typer(help="Configuration")
    app.add_typer(cfg_app, name="config")

    @cfg_app.command("show")
    def cfg_show(ctx: typer.Context) -> None:
        typer.echo(json.dumps(_config(ctx).to_dict(), indent=2, sort_keys=True))

    # Execute without letting Click `sys.exit()`.
    command = typer.main.get_command(app)
    try:
        rv = command.main(args=argv, prog_name="verified-users", standalone_mode=False)
        if isinstance(rv, int):
            return int(rv)
        return 0
    except click.ClickException as e:
        e.show()
        return int(e.exit_code)
    except (ConfigError, MalformedUserError, ValueError) as e:
        typer.echo(f"ERROR: {e}", err=True)
        return 2
    except (ClientError, BotoCoreError) as e:
        typer.echo(f"ERROR: AWS request failed: {e}", err=True)
        return 2
