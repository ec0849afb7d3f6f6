"""
Command Line Interface Module
Provides the `start` command that boots the configured Aternos server
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from .config import BotConfig
from .exceptions import ConfigurationError
from .models.start_result import ProgressStage, StartResult
from .services.automation.automation_service import AutomationService

PROGRESS_MESSAGES = {
    ProgressStage.LOGIN: ("Logging In", "Accessing Aternos account..."),
    ProgressStage.FINDING: ("Finding Server", "Looking for {server} server..."),
    ProgressStage.STARTING: ("Starting Server", "Initiating server startup..."),
}


class CLIHandler:
    """CLI Handler Class"""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        self.progress_log: list[ProgressStage] = []

    def create_argument_parser(self) -> argparse.ArgumentParser:
        """Create command line argument parser"""
        parser = argparse.ArgumentParser(
            description="Aternos server starter",
            prog="aternos-bot",
        )
        subparsers = parser.add_subparsers(dest="command", required=True)

        start = subparsers.add_parser("start", help="Start the Aternos Minecraft server")
        start.add_argument(
            "--verbose",
            action="store_true",
            help="Enable verbose logging output"
        )
        start.add_argument(
            "--server",
            type=str,
            default=None,
            help="Server name to start (overrides SERVER_NAME)"
        )
        start.add_argument(
            "--headed",
            action="store_true",
            help="Show the browser window instead of running headless"
        )
        start.add_argument(
            "--no-screenshots",
            action="store_true",
            help="Do not write debug screenshots"
        )
        start.add_argument(
            "--env-file",
            type=str,
            default=None,
            help="Path to a .env file with ATERNOS_USERNAME / ATERNOS_PASSWORD"
        )
        return parser

    def setup_logging(self, verbose: bool = False):
        """Route log records through rich"""
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.INFO,
            format="%(message)s",
            datefmt="[%X]",
            handlers=[RichHandler(console=self.console, rich_tracebacks=True, show_path=False)],
            force=True,
        )

    def build_config(self, args: argparse.Namespace) -> BotConfig:
        """
        Load configuration from the environment and apply command line overrides

        Raises:
            ConfigurationError: If credentials or the server name are missing
        """
        config = BotConfig.from_env(args.env_file)
        if args.server:
            config.server_name = args.server
        if args.headed:
            config.browser.headless = False
        if args.no_screenshots:
            config.screenshots_enabled = False
        config.validate()
        return config

    async def start_server(self, config: BotConfig, service: Optional[AutomationService] = None) -> StartResult:
        """Run the start sequence with a live status line"""
        service = service or AutomationService(config)

        with self.console.status("[bold blue]Starting Server[/] Initializing automation...") as status:
            def on_progress(stage: ProgressStage):
                self.progress_log.append(stage)
                title, description = PROGRESS_MESSAGES[stage]
                status.update(f"[bold blue]{title}[/] {description.format(server=config.server_name)}")

            result = await service.start_server(on_progress)

        self.show_result(result)
        return result

    def show_result(self, result: StartResult):
        if result.success and result.already_running:
            panel = Panel("Your Minecraft server is already online!",
                          title="✅ Server Already Running", border_style="green")
        elif result.success:
            panel = Panel("Your Minecraft server is starting up!",
                          title="✅ Server Started", border_style="green")
        else:
            panel = Panel(result.error or "Unknown error occurred",
                          title="❌ Start Failed", border_style="red")
        self.console.print(panel)


def main(argv: Optional[list[str]] = None):
    """CLI main entry point"""
    cli_handler = CLIHandler()
    parser = cli_handler.create_argument_parser()
    args = parser.parse_args(argv)

    cli_handler.setup_logging(args.verbose)

    try:
        config = cli_handler.build_config(args)
    except ConfigurationError as e:
        cli_handler.console.print(f"[red]❌ Error: {e.message}[/]")
        sys.exit(1)

    try:
        result = asyncio.run(cli_handler.start_server(config))
    except KeyboardInterrupt:
        cli_handler.console.print("\n⚠️  Operation cancelled by user")
        sys.exit(1)

    sys.exit(0 if result.success else 1)


if __name__ == "__main__":
    main()
