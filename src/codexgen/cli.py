"""
Command-line front end: create-codex-app.

Parses flags into interview overrides, resolves the configuration,
materializes the template and saves the configuration for next time.

Exit codes: 0 success, 1 fatal error, 130 aborted by the user.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from rich.console import Console
from rich.logging import RichHandler

from codexgen import __version__
from codexgen.catalog import build_default_graph
from codexgen.errors import CodexError, InvalidInput, ResolutionAborted
from codexgen.generator import TemplateCatalog, generate_project
from codexgen.interview import Interview
from codexgen.model import QuestionGraph, QuestionKind
from codexgen.prompting import ConsolePrompter, Prompter, RetryPolicy
from codexgen.resolver import ConfigResolver
from codexgen.serialization import graph_to_yaml
from codexgen.store import ConfigStore

logger = logging.getLogger("codexgen")
warnings_logger = logging.getLogger("py.warnings")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_ABORTED = 130

_TRUE = {"true", "yes", "y", "1", "on"}
_FALSE = {"false", "no", "n", "0", "off"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="create-codex-app",
        description="🧱 Codex App Generator - Create modern web apps instantly",
    )
    parser.add_argument("project_name", nargs="?", help="Name of your new project")
    parser.add_argument("--framework", help="Choose framework (react, next, vue)")
    parser.add_argument("--ui", help="UI library (tailwind, mui, shadcn, antd, none)")
    parser.add_argument(
        "--set", dest="assignments", action="append", default=[], metavar="ID=VALUE",
        help="Answer any question up front (repeatable)",
    )
    parser.add_argument("--config", help="Path of the saved configuration file")
    parser.add_argument("--templates", help="Template root directory")
    parser.add_argument("--reset-config", action="store_true", help="Delete the saved configuration and exit")
    parser.add_argument("--dump-questions", action="store_true", help="Print the question graph as YAML and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(verbose: bool, console: Optional[Console] = None) -> None:
    """
    Attach a single rich handler to the package logger.

    Warnings such as manifest conflicts are routed through the same handler.
    """
    logging.captureWarnings(True)
    handler = RichHandler(console=console, show_time=False, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    for target in (logger, warnings_logger):
        target.setLevel(logging.DEBUG if verbose else logging.INFO)
        for existing in list(target.handlers):
            if isinstance(existing, RichHandler):
                target.removeHandler(existing)
        target.addHandler(handler)


def coerce_value(graph: QuestionGraph, question_id: str, raw: str) -> Any:
    """Turn a command-line string into the value type its question expects."""
    question = graph.get_question(question_id)
    if question is not None and question.kind is QuestionKind.CONFIRM:
        lowered = raw.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
    return raw


def parse_overrides(args: argparse.Namespace, graph: QuestionGraph) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for assignment in args.assignments:
        question_id, sep, raw = assignment.partition("=")
        if not sep or not question_id:
            raise InvalidInput(assignment, raw, "expected ID=VALUE")
        overrides[question_id.strip()] = coerce_value(graph, question_id.strip(), raw)
    if args.framework:
        overrides["framework"] = args.framework
    if args.ui:
        overrides["ui"] = args.ui
    return overrides


def _next_steps(name: str, registry: str) -> List[str]:
    return [
        "Next steps:",
        f"  cd {name}",
        f"  {registry} install",
        f"  {registry} run dev",
    ]


def main(argv: Optional[Sequence[str]] = None, prompter: Optional[Prompter] = None) -> int:
    args = build_parser().parse_args(argv)
    console = Console()
    configure_logging(args.verbose, console)
    graph = build_default_graph()

    if args.dump_questions:
        console.out(graph_to_yaml(graph))
        return EXIT_OK

    store = ConfigStore(args.config)
    if args.reset_config:
        store.clear()
        return EXIT_OK

    console.print("\n[magenta]🚀 Welcome to Codex App Generator[/magenta]\n")
    try:
        overrides = parse_overrides(args, graph)
        interview = Interview(graph, prompter or ConsolePrompter(console), RetryPolicy(max_attempts=None))
        answers = ConfigResolver(store, interview).previous_config(args.project_name, overrides)
    except ResolutionAborted:
        console.print("[yellow]Aborted.[/yellow]")
        return EXIT_ABORTED
    except CodexError as e:
        logger.error("%s", e)
        return EXIT_ERROR

    name = answers["projectName"]
    project_dir = Path.cwd() / name
    if project_dir.exists():
        logger.error("Directory %s already exists.", name)
        return EXIT_ERROR

    console.print(f"\n[cyan]📁 Creating project in {project_dir}[/cyan]\n")
    try:
        generate_project(answers, project_dir, TemplateCatalog(args.templates))
    except CodexError as e:
        logger.error("%s", e)
        return EXIT_ERROR

    store.save(answers)

    console.print(f'\n[green]✅ Project "{name}" created successfully![/green]\n')
    for line in _next_steps(name, answers.get("registry") or "npm"):
        console.print(line)
    return EXIT_OK
