from typing import Any, Dict, List, Tuple
import click


def print_components(components: Dict[str, Any]) -> None:
    width = max(len(name) for name in components)
    for name, value in components.items():
        if value is None:
            value = ""
        click.echo(f"{name.rjust(width)}: {value}")


def print_table(rows: List[Tuple[str, ...]], headers: Tuple[str, ...]) -> None:
    column_widths = [len(header) for header in headers]
    for row in rows:
        column_widths = [max(width, len(str(col))) for width, col in zip(column_widths, row)]

    for col, width in enumerate(column_widths):
        click.echo("%s" % headers[col].ljust(width + 1), nl=False)
    click.echo()
    click.echo("-" * (sum(column_widths) + len(column_widths) - 1))
    for row in rows:
        for col, width in enumerate(column_widths):
            click.echo("%s" % str(row[col]).ljust(width + 1), nl=False)
        click.echo()
