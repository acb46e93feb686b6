"""Evaluation harness for the Rubric Validator.

Posts each case to a running service, repeats it to measure verdict
stability, and checks the first verdict against the case expectations.

Usage:
    python -m eval.runner --cases eval/cases
    python -m eval.runner --cases eval/cases -n 5 --json-output eval/results/results.json
"""

import argparse
import json
import sys
import time
from pathlib import Path

import httpx

from eval.checker import (
    check_expectations,
    check_repeatability,
    compute_latency_stats,
    validate_schema,
)
from src.rubric_validator.logging import logger, setup_logging

DEFAULT_BASE_URL = "http://localhost:9030"


def load_cases(cases_dir: str) -> list[dict]:
    path = Path(cases_dir)
    cases = []
    for f in sorted(path.glob("*.json")):
        cases.append(json.loads(f.read_text()))
    return cases


def run_case(base_url: str, case: dict) -> dict:
    request_body = case.get("request", {})

    start = time.time()
    try:
        resp = httpx.post(f"{base_url}/analyze-rubric", json=request_body, timeout=90.0)
        latency_ms = int((time.time() - start) * 1000)

        if resp.status_code == 200:
            data = resp.json()
            data["_latency_ms"] = latency_ms
            return data
        return {
            "_status_code": resp.status_code,
            "_error": resp.text,
            "_latency_ms": latency_ms,
        }
    except httpx.HTTPError as e:
        return {"_error": str(e), "_latency_ms": int((time.time() - start) * 1000)}


def evaluate_case(base_url: str, case: dict, n: int) -> tuple[dict, list[int]]:
    case_id = case.get("id", "unknown")
    expect_error = case.get("expect_error", False)
    expectations = case.get("expectations", {})
    logger.info("\n[%s] %s", case_id, case.get("description", ""))

    # Error cases never reach the model, one run is enough.
    repeats = 1 if expect_error else n
    runs = [run_case(base_url, case) for _ in range(repeats)]
    latencies = [r.get("_latency_ms", 0) for r in runs]

    first = runs[0]
    case_latency = compute_latency_stats(latencies)
    case_result = {"case_id": case_id, "latency": case_latency, "expectation_results": []}

    if "_status_code" in first or "_error" in first:
        if expect_error and "_status_code" in first:
            exp_results = check_expectations(first, expectations, expect_error=True)
            case_result["pass"] = all(r["passed"] for r in exp_results)
            case_result["expectation_results"] = exp_results
            _print_expectations(exp_results)
        else:
            logger.error(
                "  FAIL (HTTP %s): %s", first.get("_status_code", "-"), first.get("_error", "")[:100]
            )
            case_result["pass"] = False
        _print_latency(case_latency)
        return case_result, latencies

    if expect_error:
        logger.error("  FAIL: expected an error response, got a verdict")
        case_result["pass"] = False
        return case_result, latencies

    schema_ok, schema_err = validate_schema(first)
    if not schema_ok:
        logger.error("  Schema: FAIL - %s", schema_err[:100])
        case_result["pass"] = False
        return case_result, latencies

    repeatability = check_repeatability(runs)
    logger.info("  Schema: PASS")
    logger.info(
        "  Validity stability: %.0f%%  |  Rule stability: %.0f%%",
        repeatability["validity_stability"] * 100,
        repeatability["rule_stability"] * 100,
    )
    _print_latency(case_latency)

    exp_results = check_expectations(first, expectations, expect_error=False)
    _print_expectations(exp_results)

    case_result["pass"] = all(r["passed"] for r in exp_results) if exp_results else True
    case_result["repeatability"] = repeatability
    case_result["expectation_results"] = exp_results
    return case_result, latencies


def _print_latency(latency: dict) -> None:
    logger.info("  Latency: mean=%sms, p95=%sms", latency["mean_ms"], latency["p95_ms"])


def _print_expectations(exp_results: list[dict]) -> None:
    if not exp_results:
        return
    logger.info("  Expectations:")
    for r in exp_results:
        status = "PASS" if r["passed"] else "FAIL"
        logger.info("    %s: %s (%s)", r["check"], status, r["detail"])


def main():
    parser = argparse.ArgumentParser(description="Rubric Validator Evaluation Harness")
    parser.add_argument("--cases", default="eval/cases", help="Directory with test cases")
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL, help="Service base URL")
    parser.add_argument("-n", type=int, default=3, help="Repeat count for stability check")
    parser.add_argument("--json-output", type=str, default=None, help="Path to save JSON results")
    args = parser.parse_args()

    cases = load_cases(args.cases)
    if not cases:
        logger.error("No cases found in %s", args.cases)
        sys.exit(1)

    logger.info("Rubric Validator Evaluation Harness")
    logger.info("Cases: %s, Repeats: %s", len(cases), args.n)
    logger.info("%s", "=" * 60)

    all_latencies: list[int] = []
    results = []
    for case in cases:
        result, case_latencies = evaluate_case(args.base_url, case, args.n)
        results.append(result)
        all_latencies.extend(case_latencies)

    logger.info("\n%s", "=" * 60)
    passed = sum(1 for r in results if r.get("pass"))
    total_expectations = sum(len(r["expectation_results"]) for r in results)
    expectations_passed = sum(
        sum(1 for e in r["expectation_results"] if e["passed"]) for r in results
    )
    overall_latency = compute_latency_stats(all_latencies)

    logger.info("Results: %s/%s cases passed", passed, len(results))
    if total_expectations > 0:
        logger.info("Expectations: %s/%s checks passed", expectations_passed, total_expectations)
    logger.info(
        "Latency (overall): mean=%sms, p95=%sms",
        overall_latency["mean_ms"],
        overall_latency["p95_ms"],
    )

    if args.json_output:
        output_path = Path(args.json_output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_data = {
            "repeats": args.n,
            "cases_passed": passed,
            "cases_total": len(results),
            "expectations_passed": expectations_passed,
            "expectations_total": total_expectations,
            "overall_latency": overall_latency,
            "results": results,
        }
        output_path.write_text(json.dumps(output_data, indent=2))
        logger.info("\nResults saved to: %s", args.json_output)

    sys.exit(0 if passed == len(results) else 1)


if __name__ == "__main__":
    setup_logging()
    main()
