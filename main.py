#!/usr/bin/env python3
"""Vector Plus: Advanced Trading Strategies CLI."""

import argparse
import json
import logging
import sys
import time
from datetime import datetime
from typing import List, Optional

import pytz
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from adjustments import CapStatus, adjust_amount, validate_config
from config import (
    COMBINED_CONFIG_FILE, DEFAULT_NETWORK, DEFAULT_SETTINGS_FILE, LOGGING, NETWORKS,
    OPTION_CONFIG_FILE, TWAP_CONFIG_FILE, VOLATILITY_CONFIG_FILE, VOLATILITY_DEFAULTS,
)
from errors import VectorPlusError
from interactive import run_interactive
from settings import init_settings, load_settings
from strategies import (
    build_combined_strategy, build_option_config, build_twap_config, estimate_premium,
    load_twap_config, save_strategy, simulate_twap,
)
from volatility import build_config, load_config, save_config

logger = logging.getLogger("vector_plus")


def get_console() -> Console:
    """Get a rich console bound to the current stdout."""
    return Console()


def now_ts() -> int:
    """Current Unix time in seconds."""
    return int(time.time())


def format_timestamp(ts: int) -> str:
    """Render a Unix timestamp in UTC."""
    return datetime.fromtimestamp(ts, pytz.utc).strftime("%Y-%m-%d %H:%M:%S %Z")


def setup_logging(verbose: bool):
    """Route log records through rich on stderr."""
    level = LOGGING["verbose_level"] if verbose else LOGGING["level"]
    logging.basicConfig(
        level=level,
        format=LOGGING["format"],
        handlers=[RichHandler(console=Console(stderr=True), show_path=LOGGING["show_path"])],
        force=True,
    )


def print_banner(console: Console):
    """Print the Vector Plus banner."""
    console.print(Panel(
        "[bold]VECTOR PLUS[/bold]\nAdvanced Trading Strategies CLI\nfor 1inch Protocol",
        style="bright_blue",
        expand=False,
    ))
    console.print()


# =============================================================================
# Volatility
# =============================================================================

def cmd_volatility_create(args):
    """Create a volatility config file."""
    console = get_console()
    config = build_config(
        args.baseline_volatility,
        args.current_volatility,
        args.max_execution_size,
        args.min_execution_size,
        args.conservative_mode,
        now=now_ts(),
    )
    save_config(config, args.output)

    mode = "[green]ON[/green]" if config.conservative_mode else "[red]OFF[/red]"
    console.print(f"[green]✅ Created volatility config:[/green] [cyan]{escape(args.output)}[/cyan]")
    console.print(f"📊 Baseline volatility: [yellow]{config.baseline_volatility}bps[/yellow]")
    console.print(f"📈 Current volatility: [yellow]{config.current_volatility}bps[/yellow]")
    console.print(f"💰 Max execution: [yellow]{args.max_execution_size} ETH[/yellow]")
    console.print(f"🔒 Conservative mode: {mode}")
    console.print()
    console.print("[bold]🚀 Next steps:[/bold]")
    console.print(f"  [blue]•[/blue] vector-plus volatility validate {escape(args.output)}")
    console.print(f"  [blue]•[/blue] vector-plus volatility calculate --amount 1.0 --config {escape(args.output)}")


def cmd_volatility_validate(args) -> int:
    """Validate a volatility config file. Returns the exit status."""
    console = get_console()
    console.print(f"[cyan]🔍 Validating volatility config:[/cyan] [yellow]{escape(args.file)}[/yellow]")

    config = load_config(args.file)
    report = validate_config(config, now=now_ts())

    if report.clean:
        console.print("[green]✅ Volatility configuration is valid![/green]")
        table = Table(title="Configuration Summary")
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="green")
        table.add_row("Baseline", f"{config.baseline_volatility}bps")
        table.add_row("Current", f"{config.current_volatility}bps")
        table.add_row("Threshold", f"{config.volatility_threshold}bps")
        table.add_row("Emergency", f"{config.emergency_threshold}bps")
        table.add_row("Conservative mode", "ON" if config.conservative_mode else "OFF")
        table.add_row("Last update", format_timestamp(config.last_update_time))
        console.print(table)
        return 0

    for warning in report.warnings:
        console.print(f"[yellow]⚠️  {warning}[/yellow]")
    for error in report.errors:
        console.print(f"[red]🚨 {error}[/red]")

    report.raise_for_errors()
    return 0


def cmd_volatility_calculate(args):
    """Calculate the volatility-adjusted execution amount."""
    console = get_console()
    config = load_config(args.config_file)

    console.print(f"[cyan]🧮 Calculating volatility adjustment for:[/cyan] [yellow]{args.amount} ETH[/yellow]")
    result = adjust_amount(args.amount, config)

    analysis = Table(title="Volatility Analysis")
    analysis.add_column("Metric", style="cyan")
    analysis.add_column("Value", justify="right", style="green")
    analysis.add_row("Baseline volatility", f"{config.baseline_volatility}bps")
    analysis.add_row("Current volatility", f"{config.current_volatility}bps")
    analysis.add_row("Adjustment factor", f"{result.adjustment_factor_percent}%")
    console.print(analysis)

    amounts = Table(title="Execution Amounts")
    amounts.add_column("Amount", style="cyan")
    amounts.add_column("ETH", justify="right", style="green")
    amounts.add_row("Original", f"{result.amount.normalize():f}")
    amounts.add_row("Adjusted", f"{result.adjusted_amount.normalize():f}")
    amounts.add_row("Final", f"{result.final_amount.normalize():f}")
    amounts.add_row("Min allowed", f"{result.min_allowed.normalize():f}")
    amounts.add_row("Max allowed", f"{result.max_allowed.normalize():f}")
    console.print(amounts)

    if result.capped == CapStatus.AT_MAX:
        console.print("[yellow]⚠️  Amount capped at maximum limit[/yellow]")
    elif result.capped == CapStatus.AT_MIN:
        console.print("[yellow]⚠️  Amount raised to minimum limit[/yellow]")


# =============================================================================
# TWAP / Options / Combined
# =============================================================================

def cmd_twap_create(args):
    """Create a TWAP config file."""
    console = get_console()
    console.print("[cyan]🕒 Creating TWAP configuration...[/cyan]")
    config = build_twap_config(args.duration, args.intervals, args.randomize, now=now_ts())
    save_strategy(config, args.output)

    console.print(f"  • Duration: {config.duration_minutes} minutes")
    console.print(f"  • Intervals: {config.intervals}")
    console.print(f"  • Randomization: {'enabled' if config.randomize_execution else 'disabled'}")
    console.print(f"[green]✅ TWAP config created:[/green] {escape(args.output)}")


def cmd_twap_simulate(args):
    """Show the slice schedule for a TWAP order."""
    console = get_console()
    console.print("[cyan]🎯 Simulating TWAP execution...[/cyan]")
    config = load_twap_config(args.config_file)
    slices = simulate_twap(config, args.order_size)

    console.print(f"  • Config: {escape(args.config_file)}")
    console.print(f"  • Order size: {args.order_size} ETH")

    table = Table(title=f"{len(slices)} slices over {config.duration_minutes} minutes")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Offset", justify="right", style="cyan")
    table.add_column("Amount (ETH)", justify="right", style="green")
    for s in slices:
        minutes, seconds = divmod(s.offset_seconds, 60)
        table.add_row(str(s.index), f"+{minutes}m{seconds:02d}s", f"{s.amount.normalize():f}")
    console.print(table)

    if config.randomize_execution:
        console.print("[dim]Randomized timing enabled: live execution jitters each slice within its interval.[/dim]")
    console.print("[green]✅ Simulation complete[/green]")


def cmd_options_create(args):
    """Create a call or put option config file."""
    console = get_console()
    label = "📞 Creating call option configuration..." if args.option_type == "call" \
        else "📉 Creating put option configuration..."
    console.print(f"[cyan]{label}[/cyan]")

    option = build_option_config(args.option_type, args.strike_price, args.expiration_hours,
                                 args.premium, now=now_ts())
    save_strategy(option, args.output)

    console.print(f"  • Strike price: ${option.strike_price}")
    console.print(f"  • Expiration: {option.expiration_hours} hours ({format_timestamp(option.expires_at)})")
    console.print(f"  • Premium: ${option.premium}")
    console.print(f"[green]✅ {option.option_type.capitalize()} option config created:[/green] {escape(args.output)}")


def cmd_options_premium(args):
    """Estimate an option premium."""
    console = get_console()
    console.print("[cyan]💰 Calculating option premium...[/cyan]")
    premium = estimate_premium(args.current_price, args.strike_price, args.time_to_expiration,
                               args.option_type)
    console.print(f"  • Current price: ${args.current_price}")
    console.print(f"  • Strike price: ${args.strike_price}")
    console.print(f"  • Estimated premium: ${premium:.2f}")


def cmd_combined_create(args):
    """Create a combined TWAP + volatility strategy file."""
    console = get_console()
    console.print("[cyan]🚀 Creating combined strategy...[/cyan]")
    strategy = build_combined_strategy(args.twap_duration, args.twap_intervals,
                                       args.volatility_threshold, now=now_ts())
    save_strategy(strategy, args.output)

    console.print(f"  • TWAP duration: {strategy.twap.duration_minutes} minutes")
    console.print(f"  • TWAP intervals: {strategy.twap.intervals}")
    console.print(f"  • Volatility threshold: {strategy.volatility_threshold}bps")
    console.print(f"[green]✅ Combined strategy created:[/green] {escape(args.output)}")


# =============================================================================
# Config / Examples / Interactive
# =============================================================================

def cmd_config_init(args):
    """Write the default settings file."""
    console = get_console()
    console.print("[cyan]⚙️  Initializing Vector Plus configuration...[/cyan]")
    init_settings(args.config, network=args.network, force=args.force)
    console.print(f"  • Network: {args.network}")
    console.print(f"  • Config file: {escape(args.config)}")
    console.print("[green]✅ Configuration initialized[/green]")


def cmd_config_show(args):
    """Show global flags and the settings file."""
    console = get_console()
    console.print("[cyan]📋 Vector Plus Configuration:[/cyan]")
    console.print(f"  • Network: [yellow]{args.network}[/yellow]")
    console.print(f"  • Config file: [yellow]{escape(args.config)}[/yellow]")
    console.print(f"  • Verbose: [yellow]{str(args.verbose).lower()}[/yellow]")

    settings = load_settings(args.config)
    if settings is None:
        console.print(f"[dim]No settings file at {escape(args.config)}. Run 'vector-plus config init' to create one.[/dim]")
        return
    console.print()
    console.print_json(json.dumps(settings.to_dict()))


EXAMPLES = [
    ("🌊 Volatility Strategy Examples:", [
        "vector-plus volatility create-config --current-volatility 500 --conservative-mode",
        "vector-plus volatility validate volatility-config.json",
        "vector-plus volatility calculate --amount 2.5 --config volatility-config.json",
    ]),
    ("🕒 TWAP Strategy Examples:", [
        "vector-plus twap create-config --duration 120 --intervals 12 --randomize",
        "vector-plus twap simulate --order-size 10.0 --config twap-config.json",
    ]),
    ("📞 Options Strategy Examples:", [
        "vector-plus options create-call --strike-price 2100 --expiration-hours 168 --premium 50",
        "vector-plus options premium --current-price 2000 --strike-price 2100 --time-to-expiration 24",
    ]),
    ("🚀 Combined Strategy Examples:", [
        "vector-plus combined create --twap-duration 180 --twap-intervals 18 --volatility-threshold 600",
    ]),
    ("⚙️  Configuration Examples:", [
        "vector-plus config init --force",
        "vector-plus config show",
        "vector-plus --network polygon --verbose volatility create-config",
    ]),
]

TIPS = [
    "Use --verbose flag for detailed output",
    "All configs are saved as JSON files for easy editing",
    "Run 'vector-plus interactive' for guided setup",
]


def cmd_examples(args):
    """Show example invocations."""
    console = get_console()
    console.print("[bold cyan]📚 Vector Plus Examples[/bold cyan]\n")
    for title, commands in EXAMPLES:
        console.print(f"[bold yellow]{title}[/bold yellow]")
        for command in commands:
            console.print(f"  [blue]•[/blue] {command}")
        console.print()

    console.print("[bold green]💡 Pro Tips:[/bold green]")
    for tip in TIPS:
        console.print(f"  [cyan]•[/cyan] {tip}")


def cmd_interactive(args):
    """Run the interactive strategy builder."""
    run_interactive(get_console())


# =============================================================================
# Argument parsing
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="vector-plus",
        description="Vector Plus - Advanced Trading Strategies for 1inch Limit Order Protocol",
    )
    parser.add_argument('--version', action='version', version='%(prog)s 0.1.0')
    parser.add_argument('--network', default=DEFAULT_NETWORK, choices=NETWORKS,
                        help='Network to use (default: %(default)s)')
    parser.add_argument('--config', default=DEFAULT_SETTINGS_FILE,
                        help='Configuration file path (default: %(default)s)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')

    commands = parser.add_subparsers(dest='command', metavar='COMMAND')
    commands.required = True

    # volatility
    volatility = commands.add_parser('volatility', help='Volatility-based execution strategies')
    vol_commands = volatility.add_subparsers(dest='subcommand', metavar='SUBCOMMAND')
    vol_commands.required = True

    create = vol_commands.add_parser('create-config', help='Generate volatility configuration file')
    create.add_argument('--baseline-volatility', type=int, default=VOLATILITY_DEFAULTS['baseline_volatility'],
                        help='Baseline volatility in basis points')
    create.add_argument('--current-volatility', type=int, default=VOLATILITY_DEFAULTS['current_volatility'],
                        help='Current market volatility in basis points')
    create.add_argument('--max-execution-size', type=float, default=VOLATILITY_DEFAULTS['max_execution_size'],
                        help='Maximum execution size in ETH')
    create.add_argument('--min-execution-size', type=float, default=VOLATILITY_DEFAULTS['min_execution_size'],
                        help='Minimum execution size in ETH')
    create.add_argument('--conservative-mode', action='store_true', help='Enable conservative mode')
    create.add_argument('-o', '--output', default=VOLATILITY_CONFIG_FILE, help='Output file path')
    create.set_defaults(handler=cmd_volatility_create)

    validate = vol_commands.add_parser('validate', help='Validate volatility configuration')
    validate.add_argument('file', help='Configuration file to validate')
    validate.set_defaults(handler=cmd_volatility_validate)

    calculate = vol_commands.add_parser('calculate', help='Calculate volatility adjustment for given amount')
    calculate.add_argument('--amount', type=float, required=True, help='Base amount in ETH')
    calculate.add_argument('--config', dest='config_file', default=VOLATILITY_CONFIG_FILE, help='Volatility config file')
    calculate.set_defaults(handler=cmd_volatility_calculate)

    # twap
    twap = commands.add_parser('twap', help='Time-Weighted Average Price execution')
    twap_commands = twap.add_subparsers(dest='subcommand', metavar='SUBCOMMAND')
    twap_commands.required = True

    twap_create = twap_commands.add_parser('create-config', help='Generate TWAP configuration')
    twap_create.add_argument('--duration', type=int, required=True, help='Execution duration in minutes')
    twap_create.add_argument('--intervals', type=int, required=True, help='Number of intervals')
    twap_create.add_argument('--randomize', action='store_true', help='Enable randomization')
    twap_create.add_argument('-o', '--output', default=TWAP_CONFIG_FILE, help='Output file')
    twap_create.set_defaults(handler=cmd_twap_create)

    simulate = twap_commands.add_parser('simulate', help='Simulate TWAP execution')
    simulate.add_argument('--config', dest='config_file', default=TWAP_CONFIG_FILE, help='Configuration file')
    simulate.add_argument('--order-size', type=float, required=True, help='Order size in ETH')
    simulate.set_defaults(handler=cmd_twap_simulate)

    # options
    options = commands.add_parser('options', help='Options on limit order execution rights')
    opt_commands = options.add_subparsers(dest='subcommand', metavar='SUBCOMMAND')
    opt_commands.required = True

    for option_type in ('call', 'put'):
        create_option = opt_commands.add_parser(f'create-{option_type}',
                                                help=f'Create {option_type} option configuration')
        create_option.add_argument('--strike-price', type=float, required=True, help='Strike price in USDC')
        create_option.add_argument('--expiration-hours', type=int, required=True, help='Expiration in hours')
        create_option.add_argument('--premium', type=float, required=True, help='Premium in USDC')
        create_option.add_argument('-o', '--output', default=OPTION_CONFIG_FILE, help='Output file')
        create_option.set_defaults(handler=cmd_options_create, option_type=option_type)

    premium = opt_commands.add_parser('premium', help='Calculate option premium')
    premium.add_argument('--current-price', type=float, required=True, help='Current price')
    premium.add_argument('--strike-price', type=float, required=True, help='Strike price')
    premium.add_argument('--time-to-expiration', type=float, required=True, help='Time to expiration (hours)')
    premium.add_argument('--option-type', choices=('call', 'put'), default='call', help='Option type')
    premium.set_defaults(handler=cmd_options_premium)

    # combined
    combined = commands.add_parser('combined', help='Combined TWAP + Volatility strategies')
    comb_commands = combined.add_subparsers(dest='subcommand', metavar='SUBCOMMAND')
    comb_commands.required = True

    comb_create = comb_commands.add_parser('create', help='Create combined TWAP + Volatility strategy')
    comb_create.add_argument('--twap-duration', type=int, required=True, help='TWAP duration in minutes')
    comb_create.add_argument('--twap-intervals', type=int, required=True, help='TWAP intervals')
    comb_create.add_argument('--volatility-threshold', type=int, required=True, help='Volatility threshold (bps)')
    comb_create.add_argument('-o', '--output', default=COMBINED_CONFIG_FILE, help='Output file')
    comb_create.set_defaults(handler=cmd_combined_create)

    # config
    config = commands.add_parser('config', help='Configuration management')
    cfg_commands = config.add_subparsers(dest='subcommand', metavar='SUBCOMMAND')
    cfg_commands.required = True

    init = cfg_commands.add_parser('init', help='Initialize default configuration')
    init.add_argument('--force', action='store_true', help='Force overwrite existing config')
    init.set_defaults(handler=cmd_config_init)

    show = cfg_commands.add_parser('show', help='Show current configuration')
    show.set_defaults(handler=cmd_config_show)

    # examples / interactive
    examples = commands.add_parser('examples', help='Show examples and documentation')
    examples.set_defaults(handler=cmd_examples)

    interactive = commands.add_parser('interactive', help='Interactive strategy builder')
    interactive.set_defaults(handler=cmd_interactive)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    console = get_console()
    print_banner(console)
    logger.debug(f"Running {args.command} on {args.network}")

    try:
        status = args.handler(args)
    except KeyboardInterrupt:
        console.print("\nInterrupted.")
        return 0
    except VectorPlusError as e:
        logger.debug(f"Command failed: {e.to_dict()}")
        console.print(f"[red]Error:[/red] {escape(e.message)}")
        return 1
    except OSError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return 1

    return status or 0


if __name__ == '__main__':
    sys.exit(main())
