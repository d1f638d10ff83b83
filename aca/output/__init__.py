# ACA Output Module
# Rich console output

from aca.output.console import Console, create_console

__all__ = [
    "Console",
    "create_console",
]
