"""
Init Command - Project setup.

This module handles the `replaygraph init` command, which writes a
configuration file with the engine defaults and can provision a sample
telemetry log to replay.
"""

from pathlib import Path

import click
import yaml
from rich.console import Console
from rich.panel import Panel

from ...config import EngineConfig
from ...core.demo import DemoManager

console = Console()


def default_config() -> dict:
    engine = EngineConfig()
    return {
        "version": "1.0",
        "engine": {
            "causal_window_ms": engine.causal_window_ms,
            "marker_count": engine.marker_count,
            "tick_interval_ms": engine.tick_interval_ms,
            "tick_step": engine.tick_step,
            "speeds": list(engine.speeds),
        },
    }


def create_gitignore(config_dir: Path):
    """Ensure the .replaygraph/ directory is ignored by git."""
    gitignore = config_dir.parent / ".gitignore"
    entry = "\n# replaygraph\n.replaygraph/\n"

    if not gitignore.exists():
        gitignore.write_text(entry)
    else:
        content = gitignore.read_text()
        if ".replaygraph" not in content:
            with open(gitignore, "a") as f:
                f.write(entry)


def _init_project(root_dir: Path) -> Path:
    config_dir = root_dir / ".replaygraph"
    config_file = config_dir / "config.yaml"

    config_dir.mkdir(parents=True, exist_ok=True)
    with open(config_file, "w") as f:
        yaml.dump(default_config(), f, sort_keys=False, default_flow_style=False)

    create_gitignore(config_dir)
    return config_file


@click.command()
@click.option("--force", is_flag=True, help="Overwrite existing configuration")
@click.option("--demo", is_flag=True, help="Write a sample telemetry log to try replaygraph instantly")
def init(force: bool, demo: bool):
    """
    Initialize replaygraph in the current directory.

    If --demo is used, a sample log is created in ./replaygraph-demo
    and that directory is initialized automatically.
    """
    console.print(Panel.fit("[bold blue]replaygraph init[/bold blue]", border_style="blue"))

    if demo:
        log_path = DemoManager(Path.cwd()).provision()
        demo_dir = log_path.parent
        console.print(f"📂 Created demo log at: [bold]{log_path}[/bold]")

        _init_project(demo_dir)

        console.print("\n[bold green]Ready to go! Try these commands:[/bold green]")
        console.print(f"1. cd {demo_dir.name}")
        console.print("2. [bold cyan]replaygraph build[/bold cyan]")
        console.print("3. [bold cyan]replaygraph replay --position 50[/bold cyan]")
        console.print("4. [bold cyan]replaygraph related click-6[/bold cyan]")
        return

    root_dir = Path.cwd()
    config_file = root_dir / ".replaygraph" / "config.yaml"

    if config_file.exists() and not force:
        console.print(f"[yellow]Configuration already exists at {config_file}[/yellow]")
        console.print("Use --force to overwrite it.")
        return

    config_file = _init_project(root_dir)
    console.print("\n✨ [bold green]Initialized successfully![/bold green]")
    console.print(f"   Config created at: [dim]{config_file}[/dim]")
