"""
replaygraph CLI - Main entry point.

This module registers all CLI commands. Each command is implemented
in its own module under cli/commands/.
"""

import click

from .commands import build, related, replay, search
from .commands.init import init


@click.group()
@click.version_option(package_name="replaygraph")
def main():
    """replaygraph: Causal replay of client telemetry.

    Turns a JSON log of network requests, clicks, key presses and errors
    into a graph of domains, endpoints and events, and replays it.

    \b
    Quick Start:
      replaygraph init --demo
      replaygraph build replaygraph-demo/telemetry.json
      replaygraph replay replaygraph-demo --position 50
      replaygraph related click-6 --log replaygraph-demo
    """
    pass


# Register commands
main.add_command(build.build)
main.add_command(replay.replay)
main.add_command(related.related)
main.add_command(search.search)
main.add_command(init)

if __name__ == "__main__":
    main()
