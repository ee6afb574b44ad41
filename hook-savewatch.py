# PyInstaller hook for savewatch
# This ensures all necessary modules are included

hiddenimports = [
    # Click dependencies
    'click',
    'click.core',
    'click.decorators',
    'click.exceptions',
    'click.types',
    'click.utils',
    'click.termui',
    
    # Colorama
    'colorama',
    'colorama.ansi',
    'colorama.ansitowin32',
    'colorama.initialise',
    'colorama.win32',
    'colorama.winterm',
    
    # Watchdog picks its observer per platform at import time
    'watchdog',
    'watchdog.observers',
    'watchdog.observers.api',
    'watchdog.observers.inotify',
    'watchdog.observers.fsevents',
    'watchdog.observers.read_directory_changes',
    'watchdog.observers.kqueue',
    'watchdog.observers.polling',
    'watchdog.events',
    'watchdog.utils',
    
    # TOML libraries
    'tomli',
]

# Ensure TOML config files are included
datas = [
    ('src/savewatch/default.config.toml', 'savewatch/'),
]
