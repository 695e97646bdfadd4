#!/usr/bin/env python3
"""
PROVIDERCTL CLI
---------------
Thin command-line front end over a local provider repository:

  components  render a provider's install-ready components
  images      list the container images a provider would pull
  template    render a workload-cluster template
  init        render the requested providers and record them in the inventory

Author: ProviderCtl Team
Date: 2026-10-17
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from providerctl.core.config import default_variables
from providerctl.core.context import OperationContext
from providerctl.core.errors import ProviderctlError
from providerctl.core.installer import InitOptions, Installer
from providerctl.core.models import Provider, ProviderType
from providerctl.inventory.client import InventoryClient
from providerctl.inventory.store import InventoryStore, KubernetesInventoryStore
from providerctl.repository.components_client import ComponentsClient
from providerctl.repository.repository import LocalRepository
from providerctl.repository.templates import TemplateClient

console = Console()
err_console = Console(stderr=True)

PROVIDER_TYPES = {
    "core": ProviderType.CORE,
    "bootstrap": ProviderType.BOOTSTRAP,
    "control-plane": ProviderType.CONTROL_PLANE,
    "infrastructure": ProviderType.INFRASTRUCTURE,
}


class ProviderctlCLI:
    """
    CLI wrapper that translates user commands into client calls.
    """

    def __init__(self, inventory_store: Optional[InventoryStore] = None):
        # Without an injected store, init talks to the cluster from the kubeconfig
        self.inventory_store = inventory_store
        self.parser = argparse.ArgumentParser(
            prog="providerctl",
            description="providerctl - render and inspect cluster provider components",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        self._setup_args()

    def _add_repository_args(self, parser: argparse.ArgumentParser):
        parser.add_argument("repository", help="Path to a local provider repository")
        parser.add_argument("--provider", required=True, help="Provider name (e.g. cluster-api, aws)")
        parser.add_argument("--type", choices=sorted(PROVIDER_TYPES), default="infrastructure",
                            help="Provider type (default: infrastructure)")
        parser.add_argument("--version", dest="provider_version", default="",
                            help="Provider version (default: repository latest)")
        parser.add_argument("--target-namespace", default="", help="Namespace to install into")
        parser.add_argument("--config", default=None, help="Variables file (default: ~/.cluster-api/clusterctl.yaml)")

    def _setup_args(self):
        self.parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
        subparsers = self.parser.add_subparsers(dest="command", metavar="Command")

        components_parser = subparsers.add_parser("components", help="Render provider components")
        self._add_repository_args(components_parser)
        components_parser.add_argument("--watching-namespace", default="",
                                       help="Namespace the controller watches (default: all)")
        components_parser.add_argument("--plain", action="store_true", help="Print raw YAML without highlighting")

        images_parser = subparsers.add_parser("images", help="List images used by provider components")
        self._add_repository_args(images_parser)
        images_parser.add_argument("--watching-namespace", default="", help=argparse.SUPPRESS)

        template_parser = subparsers.add_parser("template", help="Render a workload cluster template")
        self._add_repository_args(template_parser)
        template_parser.add_argument("--bootstrap", default="kubeadm", help="Bootstrap provider (default: kubeadm)")
        template_parser.add_argument("--flavor", default="", help="Template flavor")
        template_parser.add_argument("--plain", action="store_true", help="Print raw YAML without highlighting")

        init_parser = subparsers.add_parser("init", help="Render providers and record them in the inventory")
        init_parser.add_argument("repositories", help="Directory holding one provider repository per provider name")
        init_parser.add_argument("--core", default="", help="Core provider as name[:version] (default on first run: cluster-api)")
        init_parser.add_argument("-b", "--bootstrap", action="append", default=[],
                                 help="Bootstrap providers as name[:version], comma separated (default on first run: kubeadm-bootstrap)")
        init_parser.add_argument("-c", "--control-plane", action="append", default=[],
                                 help="Control plane providers as name[:version], comma separated (default on first run: kubeadm-control-plane)")
        init_parser.add_argument("-i", "--infrastructure", action="append", default=[],
                                 help="Infrastructure providers as name[:version], comma separated")
        init_parser.add_argument("--target-namespace", default="",
                                 help="Namespace to install into (default: each provider's own namespace)")
        init_parser.add_argument("--watching-namespace", default="", help="Namespace the providers watch (default: all)")
        init_parser.add_argument("--config", default=None, help="Variables file (default: ~/.cluster-api/clusterctl.yaml)")
        init_parser.add_argument("--kubeconfig", default=None, help="Kubeconfig of the management cluster")
        init_parser.add_argument("--timeout", type=float, default=None, help="Seconds allowed for inventory calls")
        init_parser.add_argument("--output-dir", default=None, help="Write each provider's rendered components here")

    def _provider(self, args: argparse.Namespace) -> Provider:
        return Provider(name=args.provider, type=PROVIDER_TYPES[args.type])

    def _print_yaml(self, text: str, plain: bool):
        if plain:
            console.print(text, end="", markup=False, emoji=False, highlight=False, soft_wrap=True)
        else:
            console.print(Syntax(text, "yaml", theme="monokai"))

    def _run_components(self, args: argparse.Namespace):
        repository = LocalRepository(args.repository)
        components = ComponentsClient(self._provider(args), repository, default_variables(args.config)).get(
            args.provider_version, args.target_namespace, args.watching_namespace
        )
        if args.command == "images":
            table = Table(title=f"{components.name} {components.version} images", header_style="bold magenta")
            table.add_column("#", justify="right")
            table.add_column("Image", style="cyan")
            for i, image in enumerate(components.images, 1):
                table.add_row(str(i), image)
            console.print(table)
            return
        self._print_yaml(components.yaml, args.plain)

    def _run_template(self, args: argparse.Namespace):
        repository = LocalRepository(args.repository)
        template = TemplateClient(self._provider(args), args.provider_version, repository,
                                  default_variables(args.config)).get(args.flavor, args.bootstrap, args.target_namespace)
        self._print_yaml(template.yaml, args.plain)

    @staticmethod
    def _split_refs(values: List[str]) -> List[str]:
        return [ref.strip() for value in values for ref in value.split(",") if ref.strip()]

    def _run_init(self, args: argparse.Namespace):
        root = Path(args.repositories)
        store = self.inventory_store
        if store is None:
            store = KubernetesInventoryStore.from_kubeconfig(args.kubeconfig)
        installer = Installer(lambda name: LocalRepository(root / name), default_variables(args.config),
                              InventoryClient(store))
        options = InitOptions(
            core=args.core,
            bootstrap=self._split_refs(args.bootstrap),
            control_plane=self._split_refs(args.control_plane),
            infrastructure=self._split_refs(args.infrastructure),
            target_namespace=args.target_namespace,
            watching_namespace=args.watching_namespace,
        )
        ctx = OperationContext.with_timeout(args.timeout) if args.timeout else OperationContext()

        console.print("[bold]Performing init...[/bold]")
        result = installer.init(ctx, options)

        if args.output_dir:
            output_dir = Path(args.output_dir)
            output_dir.mkdir(parents=True, exist_ok=True)
            for components in result.components:
                path = output_dir / f"{components.name}-{components.version}.yaml"
                path.write_text(components.yaml, encoding="utf-8")

        for components in result.components:
            console.print(f" - {components.name} {components.type} installed ({components.version})",
                          markup=False, highlight=False)

        if result.first_execution:
            console.print("\n[bold green]Your management cluster inventory has been initialized successfully![/bold green]")
            console.print("Apply the rendered components to the cluster, e.g. with --output-dir and kubectl apply -f.")

    def run(self, argv: Optional[List[str]] = None) -> int:
        args = self.parser.parse_args(argv)
        logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                            format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)

        if not args.command:
            self.parser.print_help()
            return 0

        try:
            if args.command in ("components", "images"):
                self._run_components(args)
            elif args.command == "init":
                self._run_init(args)
            else:
                self._run_template(args)
        except ProviderctlError as e:
            err_console.print(Panel(str(e), title="[bold red]Error[/bold red]", border_style="red", expand=False))
            return 1
        return 0


def main() -> int:
    """Application entry point with interrupt handling."""
    try:
        return ProviderctlCLI().run()
    except KeyboardInterrupt:
        err_console.print("\n[bold red]Terminated by user.[/bold red]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
