import click

from . import pass_config
from .utils import print_table
from ...config import Config


@click.group()
def scheme():
    """Query/update the URI types used for schemes.
    """
    pass


@scheme.command("list")
@pass_config
def scheme_list(config: Config):
    """List the registered schemes and their URI types.
    """
    from ...factory import Factory

    factory = Factory.from_config(config)
    rows = [(name, uri_type.Name) for name, uri_type in factory.registry.items()]
    print_table(rows, ("scheme", "type"))


@scheme.command("add")
@pass_config
@click.argument("name")
@click.argument("type_name", metavar="TYPE")
def scheme_add(config: Config, name: str, type_name: str):
    """Use the URI TYPE for the scheme NAME.

    TYPE is one of generic, http, ftp, ws, data or file.
    """
    from ...factory import check_scheme_type

    check_scheme_type(name, type_name)
    config.set_option(f"scheme.{name.lower()}.type", type_name.lower())
    config.save()
    click.echo("Success.")


@scheme.command("remove")
@pass_config
@click.argument("name")
def scheme_remove(config: Config, name: str):
    """Remove the configured URI type of the scheme NAME.
    """
    config.delete_section(f"scheme.{name.lower()}")
    config.save()
    click.echo("Success.")
