import click
from typing import Optional

from . import pass_config
from .utils import print_components
from ...config import Config


@click.command()
@pass_config
@click.argument("uri")
@click.option("-b", "--base", help="Base URI to resolve against. Defaults to the resolve.base configuration option.")
def resolve(config: Config, uri: str, base: Optional[str]):
    """Resolve the URI against a base URI.
    """
    from ...factory import Factory

    if base is None:
        base = config.get_option("resolve.base", default=None)

    factory = Factory.from_config(config)
    resolved = factory.create(uri, base)
    click.echo(resolved)
    if config.verbose:
        click.echo(f"type: {type(resolved).__name__}")
        print_components(resolved.components())


@click.command()
@pass_config
@click.argument("uri")
def parse(config: Config, uri: str):
    """Print the components of the URI.
    """
    from ...uri import parse as parse_uri

    print_components(parse_uri(uri))
