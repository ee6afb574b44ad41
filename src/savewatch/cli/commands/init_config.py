"""
Init-config command for SaveWatch CLI
"""

import sys
from pathlib import Path

import click
from colorama import Fore, Style

from savewatch.core.config import CONFIG_FILENAME


DEFAULT_TOML_CONTENT = '''# SaveWatch Configuration File

[savewatch]
queue_size = 0
max_restarts = 5
restart_delay = 1.0
health_interval = 0.5
log_level = "info"
'''


@click.command()
@click.argument('config_path', type=click.Path(), default=CONFIG_FILENAME)
def init_config_command(config_path: str):
    """Create a TOML configuration file. Defaults to 'savewatch.config.toml' if no path specified."""
    
    try:
        if not config_path.endswith('.toml'):
            click.echo(f"{Fore.YELLOW}Warning: Config file should have .toml extension. Adding .toml{Style.RESET_ALL}")
            config_path = config_path + '.toml'
        
        default_config_path = Path(__file__).parent.parent.parent / 'default.config.toml'
        
        if default_config_path.exists():
            toml_content = default_config_path.read_text(encoding='utf-8')
        else:
            toml_content = DEFAULT_TOML_CONTENT
        
        with open(config_path, 'w', encoding='utf-8') as dest:
            dest.write(toml_content)
        
        click.echo(f"{Fore.GREEN}TOML configuration file created: {config_path}{Style.RESET_ALL}")
        click.echo(f"{Fore.CYAN}Edit this file to customize restarts and logging.{Style.RESET_ALL}")
        
    except OSError as e:
        click.echo(f"{Fore.RED}Error creating config file: {e}{Style.RESET_ALL}")
        sys.exit(1)
