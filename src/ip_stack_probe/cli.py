"""Console entrypoints for the IP-stack probe."""

from collections.abc import Callable

import typer
from rich.console import Console

from ip_stack_probe import interfaces_panel
from ip_stack_probe.detection.cancel import DetectionCancelled
from ip_stack_probe.detection.environment import IPEnvironment
from ip_stack_probe.detection.logging_utils import DEFAULT_LOGGER, LoggingManager
from ip_stack_probe.detection.runner import DetectionRunner
from ip_stack_probe.detection.settings import DetectionSettings, SettingsError, load_settings
from ip_stack_probe.detection.types import SUPPORT_LABELS
from ip_stack_probe.detection.validators import (
    is_valid_ipv4,
    is_valid_ipv6,
    to_bracketed_ipv6,
    to_ipv4_host_port,
)

EnvironmentFactory = Callable[[DetectionSettings, LoggingManager], IPEnvironment]


def _default_environment(settings: DetectionSettings, logger: LoggingManager) -> IPEnvironment:
    return IPEnvironment(settings=settings, logger=logger)


class IPStackCLI:
    """Object-oriented wrapper for the Typer command-line interface."""

    def __init__(
        self,
        *,
        environment_factory: EnvironmentFactory = _default_environment,
        logger: LoggingManager = DEFAULT_LOGGER,
        console: Console | None = None,
    ) -> None:
        self.environment_factory = environment_factory
        self.logger = logger
        self.console = console
        self.settings = DetectionSettings()
        self.app = typer.Typer(help="Detect the host's IPv4/IPv6/NAT64 environment.")
        self.app.callback()(self._main)
        self.app.command("detect")(self._detect)
        self.app.command("resolve")(self._resolve)
        self.app.command("interfaces")(self._interfaces)
        self.app.command("check")(self._check)
        self.app.command("format")(self._format)

    def _main(
        self,
        config: str | None = typer.Option(
            None,
            "--config",
            "-c",
            help="Optional YAML file with detection settings.",
        ),
        verbose: bool = typer.Option(
            False,
            "--verbose",
            help="Enable verbose debug logging.",
        ),
    ) -> None:
        """Load settings and configure logging for every command."""
        self.logger.setup(verbose)
        try:
            self.settings = load_settings(config)
        except SettingsError as exc:
            typer.echo(f"Invalid settings: {exc}", err=True)
            raise typer.Exit(code=1) from exc

    def _environment(self) -> IPEnvironment:
        return self.environment_factory(self.settings, self.logger)

    def _detect(
        self,
        probe_domain: str | None = typer.Option(
            None,
            "--probe-domain",
            "-d",
            help="IPv4-only domain used to detect NAT64 (empty string skips the probe).",
        ),
        show_interfaces: bool = typer.Option(
            False,
            "--show-interfaces",
            help="Also render the parsed interface table.",
        ),
    ) -> None:
        """Classify the local network environment."""

        environment = self._environment()
        if show_interfaces:
            interfaces = environment.classifier.enumerator.list_interfaces()
            interfaces_panel.print_interfaces_panel(interfaces, console=self.console)

        runner = DetectionRunner(environment, logger=self.logger)
        handle = runner.detect(probe_domain)
        try:
            net_type = handle.result()
        except KeyboardInterrupt:
            handle.cancel()
            typer.echo("Detection cancelled.", err=True)
            raise typer.Exit(code=130) from None
        except DetectionCancelled:
            typer.echo("Detection cancelled.", err=True)
            raise typer.Exit(code=130) from None
        finally:
            runner.shutdown(wait=False)

        typer.echo(f"{net_type.name}: {SUPPORT_LABELS[net_type]}")

    def _resolve(
        self,
        domain: str = typer.Argument(..., help="Domain name to resolve."),
    ) -> None:
        """Resolve a domain through the platform resolver."""

        runner = DetectionRunner(self._environment(), logger=self.logger)
        handle = runner.resolve(domain)
        try:
            resolution = handle.result()
        except (KeyboardInterrupt, DetectionCancelled):
            handle.cancel()
            typer.echo("Resolution cancelled.", err=True)
            raise typer.Exit(code=130) from None
        finally:
            runner.shutdown(wait=False)

        if not resolution.ok:
            typer.echo(resolution.describe(), err=True)
            raise typer.Exit(code=1)
        typer.echo(resolution.address)

    def _interfaces(self) -> None:
        """Render interfaces parsed from the listing command."""

        environment = self._environment()
        interfaces = environment.classifier.enumerator.list_interfaces()
        if not interfaces:
            typer.echo("No interfaces detected.", err=True)
            raise typer.Exit(code=1)
        command = " ".join(self.settings.listing_command)
        interfaces_panel.print_interfaces_panel(interfaces, console=self.console, subtitle=command)

    def _check(
        self,
        literal: str = typer.Argument(..., help="Address literal to validate (not trimmed)."),
    ) -> None:
        """Report whether a literal is an IPv4 or IPv6 address."""

        if is_valid_ipv4(literal):
            typer.echo("ipv4")
        elif is_valid_ipv6(literal):
            typer.echo("ipv6")
        else:
            typer.echo("invalid")
            raise typer.Exit(code=1)

    def _format(
        self,
        ip: str = typer.Argument(..., help="IPv4 or IPv6 literal."),
        port: str | None = typer.Option(
            None,
            "--port",
            "-p",
            help="Port to append (omitted when empty).",
        ),
    ) -> None:
        """Format an address as host[:port], bracketing IPv6 literals."""

        if is_valid_ipv6(ip.strip("[]")):
            typer.echo(to_bracketed_ipv6(ip, port))
        elif is_valid_ipv4(ip):
            typer.echo(to_ipv4_host_port(ip, port))
        else:
            typer.echo(f"Not an IP address: {ip!r}", err=True)
            raise typer.Exit(code=1)

    def run(self) -> None:
        """Invoke the Typer application."""
        self.app()


cli = IPStackCLI()
app = cli.app


if __name__ == "__main__":
    cli.run()
