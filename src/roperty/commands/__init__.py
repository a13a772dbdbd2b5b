"""Subcommand modules for roperty.

register_commands() imports lazily so ``roperty --help`` stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Attach every subcommand to the root group."""
    from roperty.commands.decode import decode
    from roperty.commands.get import get
    from roperty.commands.init_cmd import init_cmd
    from roperty.commands.list_cmd import list_cmd
    from roperty.commands.set_cmd import set_cmd
    from roperty.commands.show import show
    from roperty.commands.upgrade import upgrade

    cli.add_command(init_cmd)
    cli.add_command(get)
    cli.add_command(set_cmd)
    cli.add_command(show)
    cli.add_command(list_cmd)
    cli.add_command(decode)
    cli.add_command(upgrade)
