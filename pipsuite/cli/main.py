"""Main CLI entry point for pipsuite.

This module provides the main click group and lazy loading
of command modules to keep startup fast.
"""

import logging

import click


class LazyGroup(click.Group):
    """A click Group that lazily loads commands.

    Command modules are only imported when one of their
    commands is actually invoked.
    """

    def __init__(self, *args, lazy_subcommands: dict[str, str] | None = None, **kwargs):
        """Initialize the lazy group.

        Args:
            lazy_subcommands: Mapping of command names to module paths.
        """
        super().__init__(*args, **kwargs)
        self._lazy_subcommands = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        """List all available commands."""
        base = super().list_commands(ctx)
        lazy = list(self._lazy_subcommands.keys())
        return sorted(set(base + lazy))

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Get a command by name, lazily loading if needed."""
        if cmd_name in self.commands:
            return self.commands[cmd_name]

        if cmd_name in self._lazy_subcommands:
            return self._lazy_load(cmd_name)

        return None

    def _lazy_load(self, cmd_name: str) -> click.Command:
        """Import a command from its module path and register it."""
        import importlib

        module_path = self._lazy_subcommands[cmd_name]
        module = importlib.import_module(module_path)

        cmd = getattr(module, cmd_name, None)
        if not isinstance(cmd, click.Command):
            # Commands whose function name differs from the command name
            cmd = next(
                (
                    attr
                    for attr in vars(module).values()
                    if isinstance(attr, click.Command) and attr.name == cmd_name
                ),
                None,
            )
        if cmd is None:
            raise click.ClickException(f"Could not find command '{cmd_name}' in {module_path}")

        self.add_command(cmd)
        return cmd


LAZY_SUBCOMMANDS = {
    "init": "pipsuite.cli.journal",
    "add": "pipsuite.cli.journal",
    "close": "pipsuite.cli.journal",
    "trades": "pipsuite.cli.journal",
    "delete": "pipsuite.cli.journal",
    "restore": "pipsuite.cli.journal",
    "purge": "pipsuite.cli.journal",
    # Position sizing
    "calc": "pipsuite.cli.calc",
    # Performance analytics
    "stats": "pipsuite.cli.stats",
    "equity": "pipsuite.cli.stats",
    "daily": "pipsuite.cli.stats",
    "hourly": "pipsuite.cli.stats",
    "strategies": "pipsuite.cli.stats",
}


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(cls=LazyGroup, lazy_subcommands=LAZY_SUBCOMMANDS, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="pipsuite")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Show debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """pipsuite - position sizing and performance analytics for a trading journal.

    \b
    Quick Start:
      pipsuite init                                   # Create config and database
      pipsuite calc XAUUSD --entry 2000 --sl 1995     # Size a position
      pipsuite stats --from 2024-01-01                # Performance summary
    """
    ctx.ensure_object(dict)

    if verbose:
        from rich.logging import RichHandler

        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            datefmt="[%X]",
            handlers=[RichHandler(rich_tracebacks=True)],
        )


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
