import click
import json
from pathlib import Path

from repolog.cli_utils import handle_command_errors
from repolog.config import get_config_path, get_default_config, load_config, save_config
from repolog.exit_codes import ConfigError


@click.group("config")
def config_cmd():
    """Configuration management commands."""
    pass


@config_cmd.command("generate")
@click.option("--yaml", "as_yaml", is_flag=True, help="Write YAML instead of JSON")
@click.option("--force", is_flag=True, help="Overwrite an existing file")
@handle_command_errors
def generate_config(as_yaml, force):
    """Write a default .repolog config file in the current directory."""
    config_path = Path.cwd() / (".repolog.yaml" if as_yaml else ".repolog.json")
    if config_path.exists() and not force:
        raise ConfigError(f"Configuration already exists at {config_path}. Use --force to overwrite.")
    try:
        written = save_config(get_default_config(), config_path)
    except OSError as e:
        raise ConfigError(f"Could not write configuration to {config_path}: {e}") from e
    click.echo(f"Default configuration written to {written}")


@config_cmd.command("show")
@click.option("--pretty", is_flag=True, help="Display as formatted JSON instead of single-line JSONL")
@click.option("--path", is_flag=True, help="Show the config file path being used")
def show_config(pretty, path):
    """Show the current configuration with all merges applied.

    By default, outputs single-line JSON (JSONL format).
    Use --pretty for human-readable formatted output.
    Use --path to see which config file is being used.
    """
    if path:
        print(json.dumps({"config_path": str(get_config_path())}))
        return

    config = load_config()

    if pretty:
        print(json.dumps(config, indent=2, ensure_ascii=False))
    else:
        print(json.dumps(config, ensure_ascii=False))
