"""
Watch command for SaveWatch CLI
"""

import queue
import sys
from functools import partial
from pathlib import Path
from typing import Optional

import click
from colorama import Fore, Style

from savewatch.core.runner import WatchRunner
from savewatch.core.session import WatchdogSession
from savewatch.cli.utils import load_config_with_fallback
from savewatch.utils.logging_utils import setup_logger
from savewatch.utils.path_utils import normalize_path, parent_directory


# Seconds between liveness checks of the runner while no change arrives
RUNNER_POLL_INTERVAL = 0.5


@click.command()
@click.argument('file', type=click.Path(dir_okay=False))
@click.option('--config', '-c', type=click.Path(),
              help='Path to configuration file (TOML)')
@click.option('--max-restarts', type=int,
              help='Respawns before giving up, 0 to retry forever')
@click.option('--restart-delay', type=float,
              help='Seconds to wait before respawning the watcher')
@click.option('--once', is_flag=True,
              help='Exit after the first change')
@click.option('--verbose', '-v', is_flag=True,
              help='Enable verbose output')
def watch_command(file: str, config: Optional[str], max_restarts: Optional[int],
                  restart_delay: Optional[float], once: bool, verbose: bool):
    """Start watching a file and report every time it is saved.
    
    FILE: File to watch. It may not exist yet, but its directory must.
    """
    target = normalize_path(file)
    config_obj = load_config_with_fallback(config, Path(parent_directory(target)), verbose)
    
    # CLI options take precedence over the config file
    if max_restarts is None:
        max_restarts = config_obj.max_restarts
    if restart_delay is None:
        restart_delay = config_obj.restart_delay
    
    setup_logger('savewatch', 'DEBUG' if verbose else config_obj.log_level)
    
    click.echo(f"{Fore.GREEN}Starting SaveWatch...{Style.RESET_ALL}")
    click.echo(f"{Fore.CYAN}Watching: {target}{Style.RESET_ALL}")
    if verbose:
        click.echo(f"{Fore.CYAN}Max restarts: {max_restarts or 'unlimited'}{Style.RESET_ALL}")
        click.echo(f"{Fore.CYAN}Restart delay: {restart_delay}s{Style.RESET_ALL}")
    
    file_changes: 'queue.Queue[bool]' = queue.Queue(maxsize=config_obj.queue_size)
    runner = WatchRunner(
        target,
        file_changes,
        max_restarts=max_restarts,
        restart_delay=restart_delay,
        session_factory=partial(WatchdogSession, health_interval=config_obj.health_interval)
    )
    
    try:
        runner.start()
        click.echo(f"{Fore.YELLOW}Press Ctrl+C to stop watching...{Style.RESET_ALL}")
        
        while True:
            try:
                file_changes.get(timeout=RUNNER_POLL_INTERVAL)
            except queue.Empty:
                if not runner.is_alive():
                    click.echo(f"{Fore.RED}Error: {runner.error}{Style.RESET_ALL}")
                    sys.exit(1)
                continue
            
            click.echo(f"CHANGED: {target}")
            if once:
                return
            
    except KeyboardInterrupt:
        click.echo(f"\n{Fore.YELLOW}Stopping SaveWatch...{Style.RESET_ALL}")
