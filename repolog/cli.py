#!/usr/bin/env python3

import click

from repolog.commands.generate import generate_handler
from repolog.commands.config import config_cmd


@click.group()
@click.version_option(package_name="repolog")
def cli():
    """repolog - Changelogs from git history.

    Walks the history of the repository you are in and writes it as
    plain text, Markdown, HTML and JSON changelogs, with annotated tags
    marking releases.
    """
    pass


cli.add_command(generate_handler, name='generate')
cli.add_command(config_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
