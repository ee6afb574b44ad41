#!/usr/bin/env python3
"""
SaveWatch CLI - Main entry point
"""

import click
from colorama import init

from savewatch.cli.commands.watch import watch_command
from savewatch.cli.commands.init_config import init_config_command

# Initialize colorama for cross-platform colored output
init()


@click.group()
@click.version_option(package_name='savewatch')
def main():
    """SaveWatch - Know when a file was saved, whichever editor saved it.
    
    Common workflows:
    
      # Print a line every time settings.toml is saved
      savewatch watch settings.toml
      
      # Block until the next save, then exit
      savewatch watch --once settings.toml
      
      # Write a config file to tune restarts and logging
      savewatch init-config
    
    Use 'savewatch COMMAND --help' for detailed help on any command.
    """
    pass


main.add_command(watch_command, name='watch')
main.add_command(init_config_command, name='init-config')


if __name__ == '__main__':
    main()
