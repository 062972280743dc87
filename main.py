"""Ad Prompt Studio: Command Line Entry Point.

Usage:
    # Generate prompts for a questionnaire saved as JSON
    python main.py generate --input answers.json

    # Use a built-in sample questionnaire, skipping the remote model
    python main.py generate --sample snack --offline

    # Save the result and print a plain-text creative brief
    python main.py generate --input answers.json --output result.json --export brief

    # Print a built-in sample questionnaire
    python main.py sample --name enhanced
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

import config
from pipeline.export import EXPORTERS, export_text
from pipeline.generator import GenerationOutcome, generate_prompts
from pipeline.llm import get_usage_summary
from pipeline.samples import DEFAULT_SAMPLE, SAMPLES, get_sample

console = Console()


def setup_logging():
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
        format="%(message)s",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def load_answers(args: argparse.Namespace) -> dict:
    """Read the answer record from --input, else from the named sample."""
    if args.input:
        path = Path(args.input)
        if not path.exists():
            console.print(f"[red]Input file not found: {path}[/red]")
            sys.exit(1)
        data = json.loads(path.read_text(encoding="utf-8"))
        # Accept both a bare record and a {"answers": {...}} request body.
        if isinstance(data, dict) and isinstance(data.get("answers"), dict):
            return data["answers"]
        return data if isinstance(data, dict) else {}
    return get_sample(args.sample)


def print_outcome(outcome: GenerationOutcome):
    data = outcome.data
    strategy = data.get("strategy", {})
    copy = data.get("copy", {})

    color = "green" if outcome.succeeded else "yellow"
    console.print(f"  [{color}]Source:[/{color}] {outcome.source}")
    if outcome.error:
        console.print(f"  [yellow]Remote error:[/yellow] {outcome.error}")
    console.print(
        f"  [bold]Strategy:[/bold] {strategy.get('approach', '?')} ({strategy.get('ratio', '?')})"
    )
    for headline in copy.get("headlines", [])[:5]:
        console.print(f"    • {headline}")


def run_generate(args: argparse.Namespace):
    answers = load_answers(args)
    settings = config.get_generation_settings()

    if not args.offline and not settings.has_api_key:
        console.print("  [dim]ANTHROPIC_API_KEY not set; using rule-based generation[/dim]")

    outcome = asyncio.run(generate_prompts(answers, settings, use_remote=not args.offline))
    print_outcome(outcome)

    output_path = Path(args.output) if args.output else None
    if output_path is None and args.save:
        output_path = config.OUTPUT_DIR / "generation_result.json"
    if output_path is not None:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(json.dumps(outcome.to_response(), indent=2), encoding="utf-8")
        console.print(f"  [green]Output saved:[/green] {output_path}")

    if args.export:
        console.print(Panel(export_text(args.export, outcome.data, answers), border_style="bright_blue"))

    usage = get_usage_summary()
    if usage["calls"]:
        console.print(
            f"  [dim]Tokens: {usage['total_tokens']:,}  Cost: ${usage['total_cost']:.4f}[/dim]"
        )


def run_sample(args: argparse.Namespace):
    console.print_json(json.dumps({"answers": get_sample(args.name)}))


def main():
    parser = argparse.ArgumentParser(
        description="Ad Prompt Studio: questionnaire answers to video, image and copy prompts",
    )
    subparsers = parser.add_subparsers(dest="command")

    generate = subparsers.add_parser("generate", help="Generate prompts from questionnaire answers")
    generate.add_argument("--input", "-i", help="Path to JSON answer record")
    generate.add_argument(
        "--sample", "-s",
        default=DEFAULT_SAMPLE,
        choices=sorted(SAMPLES),
        help=f"Built-in sample to use when --input is omitted (default: {DEFAULT_SAMPLE})",
    )
    generate.add_argument("--offline", action="store_true", help="Skip the remote model; rule-based only")
    generate.add_argument("--output", "-o", help="Write the full response JSON to this path")
    generate.add_argument("--save", action="store_true", help="Write the response JSON under OUTPUT_DIR")
    generate.add_argument("--export", choices=sorted(EXPORTERS), help="Print a plain-text export")

    sample = subparsers.add_parser("sample", help="Print a built-in sample questionnaire")
    sample.add_argument("--name", "-n", default=DEFAULT_SAMPLE, choices=sorted(SAMPLES))

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(0)

    if args.command == "sample":
        run_sample(args)
        return

    setup_logging()

    console.print(
        Panel(
            "[bold]AD PROMPT STUDIO[/bold]\n"
            "Questionnaire → Video, Image & Copy Prompts",
            border_style="bright_magenta",
        )
    )

    if args.command == "generate":
        run_generate(args)


if __name__ == "__main__":
    main()
