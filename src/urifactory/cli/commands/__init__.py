import click

from ...config import Config

pass_config = click.make_pass_decorator(Config)
