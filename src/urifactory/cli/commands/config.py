import click

from . import pass_config
from ...config import Config


def _check_option(option: str, value: str) -> None:
    from ...factory import check_scheme_type
    from ...uri import MalformedURI, parse

    section, _, rest = option.partition(".")
    if section == "scheme":
        scheme, _, key = rest.rpartition(".")
        if not scheme or key != "type":
            raise click.UsageError(f"Unknown option {option}, scheme options are set as scheme.<NAME>.type.")
        check_scheme_type(scheme, value)
    elif option == "resolve.base":
        try:
            base = parse(value)
        except MalformedURI as ex:
            raise click.BadParameter(str(ex), param_hint="VALUE")
        if not base["scheme"]:
            raise click.BadParameter(f"The base URI {value} must be an absolute URI.", param_hint="VALUE")


@click.group()
def config():
    """Query/update application configuration.
    """
    pass


@config.command()
@pass_config
@click.argument("option")
def get(config: Config, option: str):
    """Get the OPTION.
    """
    click.echo(config.get_option(option))


@config.command()
@pass_config
@click.argument("option")
@click.argument("value")
def set(config: Config, option: str, value: str):
    """Set the OPTION to the given VALUE.

    Scheme types (scheme.<NAME>.type) and the default base URI (resolve.base) are checked before they are saved.
    """
    _check_option(option, value)
    config.set_option(option, value)
    config.save()


@config.command()
@pass_config
@click.argument("option")
def delete(config: Config, option: str):
    """Delete the OPTION.
    """
    config.delete_option(option)
    config.save()
    click.echo("Success.")


@config.command()
@pass_config
def list(config: Config):
    """List all configurations OPTIONS set.
    """
    for i in config.list_options():
        click.echo(i)


@config.command()
@pass_config
def path(config: Config):
    """Print the location of the user configuration file.
    """
    click.echo(config.user_config_path)
