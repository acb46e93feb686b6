"""Command-line entry point.

Usage:
    rubric-validator serve --port 9030
    rubric-validator check --prompt "List movies by genre." --criteria-file criteria.txt
    rubric-validator check --prompt-file prompt.txt --criteria-file - --expand

``check`` drives the AnalysisOrchestrator against a running service and
prints one row per criterion as each result arrives.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from .client.api_client import DEFAULT_BASE_URL, RubricApiClient
from .client.orchestrator import AnalysisOrchestrator, AnalysisRun, CriterionRecord
from .config import settings


def _read_text(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def format_record(index: int, record: CriterionRecord, expand: bool | None = None) -> list[str]:
    if record.is_loading:
        marker = "…"
    elif record.error_message or record.verdict is None:
        marker = "!"
    else:
        marker = "✓" if record.verdict.is_valid else "✗"

    lines = [f"{index + 1:>3}. [{marker}] {record.criterion_text}"]
    if record.error_message:
        lines.append(f"       error: {record.error_message}")
        return lines
    if expand is None:
        expand = record.is_expanded
    if not expand or record.verdict is None:
        return lines

    verdict = record.verdict
    lines.append(f"       requirement: {verdict.prompt_requirement}")
    for violation in verdict.violations:
        lines.append(f"       - {violation.rule_name}: {violation.explanation}")
    if verdict.suggestion:
        lines.append(f"       suggestion: {verdict.suggestion}")
    if verdict.reasoning:
        lines.append(f"       reasoning: {verdict.reasoning}")
    return lines


def render_run(run: AnalysisRun) -> str:
    if run.error:
        return f"Error: {run.error}"
    lines: list[str] = []
    for index, record in enumerate(run.records):
        lines.extend(format_record(index, record))
    return "\n".join(lines)


def _run_to_json(run: AnalysisRun) -> dict:
    return {
        "state": run.state.value,
        "error": run.error,
        "results": [
            {
                "criterion": r.criterion_text,
                "verdict": r.verdict.to_wire() if r.verdict else None,
                "error": r.error_message,
            }
            for r in run.records
        ],
    }


async def _check(args: argparse.Namespace) -> int:
    prompt = args.prompt if args.prompt is not None else _read_text(args.prompt_file)
    criteria = _read_text(args.criteria_file)

    printed: set[int] = set()

    def on_change(run: AnalysisRun) -> None:
        # Print each row once, as soon as it settles.
        for index, record in enumerate(run.records):
            if index in printed or record.is_loading:
                continue
            printed.add(index)
            print("\n".join(format_record(index, record, expand=args.expand)), flush=True)

    async with RubricApiClient(base_url=args.base_url, timeout=args.timeout) as api:
        orchestrator = AnalysisOrchestrator(api, on_change=on_change)
        await orchestrator.analyze(prompt, criteria)

    run = orchestrator.run
    if run.error:
        print(render_run(run), file=sys.stderr)
        return 2

    if args.json_output:
        output_path = Path(args.json_output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(json.dumps(_run_to_json(run), indent=2))

    failed = sum(1 for r in run.records if r.error_message)
    invalid = sum(1 for r in run.records if r.verdict is not None and not r.verdict.is_valid)
    print(f"\n{len(run.records)} criteria: {invalid} invalid, {failed} failed")
    return 1 if failed else 0


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run(
        "rubric_validator.main:app",
        host=args.host,
        port=args.port,
        log_level=settings.log_level.lower(),
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rubric-validator", description="Rubric Validator")
    sub = parser.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check", help="Validate criteria against a prompt")
    source = check.add_mutually_exclusive_group(required=True)
    source.add_argument("--prompt", help="Original prompt text")
    source.add_argument("--prompt-file", help="File holding the original prompt ('-' for stdin)")
    check.add_argument(
        "--criteria-file", required=True, help="File with one criterion per line ('-' for stdin)"
    )
    check.add_argument("--base-url", default=DEFAULT_BASE_URL, help="Service base URL")
    check.add_argument("--timeout", type=float, default=90.0, help="Per-request timeout in seconds")
    check.add_argument("--expand", action="store_true", help="Show full verdict details")
    check.add_argument("--json-output", default=None, help="Path to save JSON results")

    serve = sub.add_parser("serve", help="Run the evaluation service")
    serve.add_argument("--host", default=settings.host)
    serve.add_argument("--port", type=int, default=settings.port)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.command == "serve":
        return _serve(args)
    return asyncio.run(_check(args))


if __name__ == "__main__":
    sys.exit(main())
