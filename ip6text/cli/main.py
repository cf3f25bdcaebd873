import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.progress import Progress, SpinnerColumn, TextColumn
from scapy.all import rdpcap, in6_getifaddr
from typing import List
import sys
import os
#  to add the root to the path
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
sys.path.insert(0, PROJECT_ROOT)

from ip6text.core.logger import get_logger, set_log_level
from ip6text.core.arpa import reverse_pointer
from ip6text.core.canonicalizer import (
    parse_and_canonicalize,
    parse_and_canonicalize_pure,
    parse_and_expand_pure,
    parse_and_expand_padded,
    transition_prefix,
    is_ipv6_address,
)
from ip6text.core.tokenizer import tokenize_classify
from ip6text.core.tokens import IPv4Addr, token_to_text
from ip6text.core.validator import is_valid
from ip6text.analysis.ipv6_analyzer import IPv6Analyzer
from ip6text.analysis.address_stats import AddressStatistics

app = typer.Typer(help="ip6text - validate and canonicalize IPv6 address text (RFC 4291, RFC 5952)")
console = Console()
logger = get_logger(__name__)
state = {"verbose": False}


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show why addresses get rejected"),
):
    state["verbose"] = verbose
    set_log_level("DEBUG" if verbose else "WARNING")


def print_each(addresses, transform):
    # every address is printed (or reported) before deciding on the exit code
    failed = 0
    for address in addresses:
        result = transform(address.strip())
        if result is None:
            failed += 1
            console.print(f"[bold red]Not a valid IPv6 address: {escape(address)}[/bold red]")
        else:
            console.print(result, highlight=False, soft_wrap=True)

    if failed:
        raise typer.Exit(code=1)


@app.command()
def canonical(
    addresses: List[str] = typer.Argument(..., help="IPv6 addresses"),
):
    """
        ip6text canonical 2001:DB8:0:0:0:0:0:1
        ip6text canonical ::ffff:192.0.2.1 fe80::1
    """
    print_each(addresses, parse_and_canonicalize)


@app.command()
def pure(
    addresses: List[str] = typer.Argument(..., help="IPv6 addresses"),
):
    """
    Canonical form without any dotted quad: ::ffff:192.0.2.1 -> ::ffff:c000:201
    """
    print_each(addresses, parse_and_canonicalize_pure)


@app.command()
def full(
    addresses: List[str] = typer.Argument(..., help="IPv6 addresses"),
    padded: bool = typer.Option(False, "--padded", "-p", help="Write every group with four hex digits"),
):
    """
    Flags:
        --padded/-p: 2001:0db8:0000:0000:0000:0000:0000:0001 instead of 2001:db8:0:0:0:0:0:1
    """
    print_each(addresses, parse_and_expand_padded if padded else parse_and_expand_pure)


@app.command()
def arpa(
    addresses: List[str] = typer.Argument(..., help="IPv6 addresses"),
):
    """
        ip6text arpa 2001:db8::1
    """
    print_each(addresses, reverse_pointer)


@app.command()
def check(
    address: str = typer.Argument(..., help="IPv6 address to validate"),
):
    """
    Exit status 0 when the address is valid, 1 otherwise.
    """
    valid = is_ipv6_address(address.strip())
    if state["verbose"]:
        if valid:
            console.print(f"[green]Valid:[/green] {escape(address)}")
        else:
            console.print(f"[red]Invalid:[/red] {escape(address)}")

    if not valid:
        raise typer.Exit(code=1)


@app.command()
def tokens(
    address: str = typer.Argument(..., help="IPv6 address to tokenize"),
):
    """
    Show the tokens of an address and what becomes of them.
    """
    address = address.strip()
    token_list = tokenize_classify(address)

    if token_list is None:
        console.print(f"[bold red]Cannot tokenize: {escape(address)}[/bold red]")
        raise typer.Exit(code=1)

    table = Table(title=f"Tokens of {escape(address)}")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Token", style="cyan")
    table.add_column("Text", style="yellow")

    for i, token in enumerate(token_list):
        table.add_row(str(i), type(token).__name__, token_to_text(token))

    console.print(table)

    if not is_valid(token_list):
        console.print("[bold red]Not a valid IPv6 address[/bold red]")
        raise typer.Exit(code=1)

    if token_list and isinstance(token_list[-1], IPv4Addr):
        family = transition_prefix(token_list[:-1])
        console.print(f"Embedded IPv4: [magenta]{family or 'rewritten in hex'}[/magenta]")

    console.print(f"Canonical: [green]{parse_and_canonicalize(address)}[/green]")
    console.print(f"Pure:      [green]{parse_and_canonicalize_pure(address)}[/green]")
    console.print(f"Expanded:  [green]{parse_and_expand_pure(address)}[/green]")


@app.command()
def interfaces():
    """
    IPv6 addresses configured on the local network interfaces.
    """
    try:
        entries = in6_getifaddr()
    except Exception as e:
        console.print(f"[bold red]❌ Cannot read interface addresses: {e}[/bold red]")
        raise typer.Exit(code=1)

    if not entries:
        console.print("[dim]No IPv6 addresses configured[/dim]")
        return

    table = Table(title="Interface IPv6 Addresses")
    table.add_column("Interface", style="cyan")
    table.add_column("Address", style="dim")
    table.add_column("Canonical", style="green")

    for addr, _scope, iface in entries:
        canonical_addr = parse_and_canonicalize(addr)
        if canonical_addr is None:
            logger.debug(f"{iface}: scapy reported an address we reject: {addr!r}")
            canonical_addr = "[red]invalid[/red]"
        table.add_row(iface, addr, canonical_addr)

    console.print(table)


@app.command()
def analyze(
    file: str = typer.Argument(..., help="PCAP file to analyze"),
    top: int = typer.Option(10, "--top", "-t", help="Number of addresses to list"),
):
    """
        ip6text analyze capture.pcap
        ip6text analyze traffic.pcap --top 20
    """
    console.print(f"[bold cyan]Analyzing {file}...[/bold cyan]\n")

    if not os.path.exists(file):
        console.print(f"[bold red]❌ File not found: {file}[/bold red]")
        raise typer.Exit(code=1)

    ipv6_analyzer = IPv6Analyzer()
    stats_collector = AddressStatistics()

    try:
        with console.status("[bold green]Reading PCAP file..."):
            packets = rdpcap(file)
    except Exception as e:
        console.print(f"[bold red]Analysis failed: {e}[/bold red]")
        raise typer.Exit(code=1)

    console.print(f"Found [yellow]{len(packets)}[/yellow] packets\n")

    ipv6_packets = 0
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Analyzing packets...", total=len(packets))

        for packet in packets:
            ipv6_info = ipv6_analyzer.analyze(packet)
            if ipv6_info:
                ipv6_packets += 1
                for raw in (packet['IPv6'].src, packet['IPv6'].dst):
                    stats_collector.update(raw, parse_and_canonicalize(raw))
            progress.update(task, advance=1)

    console.print("\n[bold green]Analysis complete![/bold green]\n")
    show_stats(stats_collector, ipv6_packets, top)


def show_stats(stats_collector, ipv6_packets, top):
    summary = stats_collector.get_summary()

    console.print("[bold]IPv6 Address Statistics:[/bold]")
    console.print(f"  IPv6 Packets: {ipv6_packets}")
    console.print(f"  Addresses Seen: {summary['total']}")
    console.print(f"  Invalid: {summary['invalid']}")
    console.print(f"  Rewritten: {summary['changed']}")
    console.print(f"  Embedded IPv4: {summary['embedded_ipv4']}")

    top_addresses = stats_collector.get_top_addresses(top)
    if top_addresses:
        table = Table(title="Top Addresses")
        table.add_column("Address", style="cyan")
        table.add_column("Count", justify="right", style="magenta")
        for addr, count in top_addresses:
            table.add_row(addr, str(count))
        console.print(table)


if __name__ == "__main__":
    app()
