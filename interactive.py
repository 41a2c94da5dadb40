"""Interactive strategy builder.

Each builder prompts for the strategy parameters and prints the
equivalent vector-plus command line.
"""

from typing import List, Optional

from rich.console import Console
from rich.prompt import Confirm, FloatPrompt, IntPrompt, Prompt

from config import COMBINED_DEFAULTS, OPTIONS_DEFAULTS, TWAP_DEFAULTS, VOLATILITY_DEFAULTS

PROGRAM = "vector-plus"

MENU = [
    ("volatility", "🌊 Volatility-based execution"),
    ("twap", "🕒 TWAP execution"),
    ("options", "📞 Options on execution rights"),
    ("combined", "🚀 Combined TWAP + Volatility"),
    ("config", "⚙️  Configuration management"),
    ("exit", "❌ Exit"),
]


def format_command(head: str, args: List[str]) -> List[str]:
    """Render a command with one argument per continuation line."""
    parts = [f"{PROGRAM} {head}"] + [f"       {arg}" for arg in args]
    return [part + " \\" for part in parts[:-1]] + [parts[-1]]


def volatility_command(baseline: int, current: int, max_size: float, conservative: bool) -> List[str]:
    args = [
        f"--baseline-volatility {baseline}",
        f"--current-volatility {current}",
        f"--max-execution-size {max_size}",
    ]
    if conservative:
        args.append("--conservative-mode")
    return format_command("volatility create-config", args)


def twap_command(duration: int, intervals: int, randomize: bool) -> List[str]:
    args = [f"--duration {duration}", f"--intervals {intervals}"]
    if randomize:
        args.append("--randomize")
    return format_command("twap create-config", args)


def options_command(option_type: str, strike_price: float, expiration_hours: int, premium: float) -> List[str]:
    args = [
        f"--strike-price {strike_price}",
        f"--expiration-hours {expiration_hours}",
        f"--premium {premium}",
    ]
    return format_command(f"options create-{option_type}", args)


def combined_command(twap_duration: int, twap_intervals: int, volatility_threshold: int) -> List[str]:
    args = [
        f"--twap-duration {twap_duration}",
        f"--twap-intervals {twap_intervals}",
        f"--volatility-threshold {volatility_threshold}",
    ]
    return format_command("combined create", args)


def print_command(console: Console, title: str, lines: List[str]):
    console.print()
    console.print(f"[green]✅ {title} configured![/green]")
    console.print(f"📁 Run: {lines[0]}", markup=False)
    for line in lines[1:]:
        console.print(line, markup=False)


def prompt_volatility_strategy(console: Console) -> List[str]:
    console.print("[bold blue]🌊 Building Volatility Strategy[/bold blue]\n")
    baseline = IntPrompt.ask("Baseline volatility (basis points)",
                             default=VOLATILITY_DEFAULTS["baseline_volatility"], console=console)
    current = IntPrompt.ask("Current volatility (basis points)",
                            default=VOLATILITY_DEFAULTS["current_volatility"], console=console)
    max_size = FloatPrompt.ask("Maximum execution size (ETH)",
                               default=VOLATILITY_DEFAULTS["max_execution_size"], console=console)
    conservative = Confirm.ask("Enable conservative mode?",
                               default=VOLATILITY_DEFAULTS["conservative_mode"], console=console)

    lines = volatility_command(baseline, current, max_size, conservative)
    print_command(console, "Volatility strategy", lines)
    return lines


def prompt_twap_strategy(console: Console) -> List[str]:
    console.print("[bold blue]🕒 Building TWAP Strategy[/bold blue]\n")
    duration = IntPrompt.ask("Execution duration (minutes)", default=TWAP_DEFAULTS["duration"], console=console)
    intervals = IntPrompt.ask("Number of intervals", default=TWAP_DEFAULTS["intervals"], console=console)
    randomize = Confirm.ask("Enable randomization?",
                            default=TWAP_DEFAULTS["randomize_execution"], console=console)

    lines = twap_command(duration, intervals, randomize)
    print_command(console, "TWAP strategy", lines)
    return lines


def prompt_options_strategy(console: Console) -> List[str]:
    console.print("[bold blue]📞 Building Options Strategy[/bold blue]\n")
    option_type = Prompt.ask("Option type", choices=["call", "put"], default="call", console=console)
    strike_price = FloatPrompt.ask("Strike price (USDC)", default=OPTIONS_DEFAULTS["strike_price"], console=console)
    expiration = IntPrompt.ask("Expiration (hours)", default=OPTIONS_DEFAULTS["expiration_hours"], console=console)
    premium = FloatPrompt.ask("Premium (USDC)", default=OPTIONS_DEFAULTS["premium"], console=console)

    lines = options_command(option_type, strike_price, expiration, premium)
    print_command(console, "Options strategy", lines)
    return lines


def prompt_combined_strategy(console: Console) -> List[str]:
    console.print("[bold blue]🚀 Building Combined Strategy[/bold blue]\n")
    twap_duration = IntPrompt.ask("TWAP duration (minutes)",
                                  default=COMBINED_DEFAULTS["twap_duration"], console=console)
    twap_intervals = IntPrompt.ask("TWAP intervals", default=COMBINED_DEFAULTS["twap_intervals"], console=console)
    threshold = IntPrompt.ask("Volatility threshold (basis points)",
                              default=COMBINED_DEFAULTS["volatility_threshold"], console=console)

    lines = combined_command(twap_duration, twap_intervals, threshold)
    print_command(console, "Combined strategy", lines)
    return lines


def prompt_configuration(console: Console) -> Optional[List[str]]:
    console.print("[bold blue]⚙️  Configuration Management[/bold blue]\n")
    action = Prompt.ask("What would you like to do? (init / show / back)",
                        choices=["init", "show", "back"], default="init", console=console)
    if action == "back":
        return None

    line = f"{PROGRAM} config {action}"
    console.print(f"[green]🔧 Run: {line}[/green]")
    return [line]


PROMPTS = {
    "volatility": prompt_volatility_strategy,
    "twap": prompt_twap_strategy,
    "options": prompt_options_strategy,
    "combined": prompt_combined_strategy,
    "config": prompt_configuration,
}


def run_interactive(console: Console) -> Optional[List[str]]:
    """Show the strategy menu and run the selected builder."""
    console.print("[bold cyan]🎯 Vector Plus Interactive Mode[/bold cyan]\n")
    for key, label in MENU:
        console.print(f"  [cyan]{key:<11}[/cyan] {label}")
    console.print()

    choice = Prompt.ask("What would you like to create?",
                        choices=[key for key, _ in MENU], default="volatility", console=console)
    if choice == "exit":
        console.print("[green]👋 Goodbye![/green]")
        return None

    return PROMPTS[choice](console)
