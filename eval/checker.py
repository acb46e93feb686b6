"""Evaluation checker utilities.

Provides verdict schema validation, stability analysis (validity and
violated-rule agreement across repeated runs), and latency statistics
(mean/p95).
"""

from pydantic import ValidationError

from src.rubric_validator.schemas.verdict import Verdict


def validate_schema(response_data: dict) -> tuple[bool, str]:
    try:
        Verdict.model_validate(response_data)
        return True, ""
    except ValidationError as e:
        return False, str(e)


def _rule_set(run: dict) -> frozenset[str]:
    return frozenset(e.get("rule", "").lower() for e in run.get("errors", []))


def check_repeatability(runs: list[dict]) -> dict:
    runs = [r for r in runs if "_error" not in r]
    if len(runs) < 2:
        return {"validity_stability": 1.0, "rule_stability": 1.0}

    baseline = runs[0]
    others = runs[1:]
    validity_matches = sum(1 for r in others if r.get("isValid") == baseline.get("isValid"))
    rule_matches = sum(1 for r in others if _rule_set(r) == _rule_set(baseline))

    return {
        "validity_stability": validity_matches / len(others),
        "rule_stability": rule_matches / len(others),
    }


def compute_latency_stats(latencies: list[int]) -> dict:
    if not latencies:
        return {"mean_ms": 0, "min_ms": 0, "max_ms": 0, "p95_ms": 0}

    latencies_sorted = sorted(latencies)
    mean = sum(latencies) / len(latencies)
    p95_idx = int(len(latencies_sorted) * 0.95)
    p95 = latencies_sorted[min(p95_idx, len(latencies_sorted) - 1)]

    return {
        "mean_ms": int(mean),
        "min_ms": latencies_sorted[0],
        "max_ms": latencies_sorted[-1],
        "p95_ms": p95,
    }


def _keyword_check(name: str, text: str, keywords: list[str]) -> dict:
    text_lower = text.lower()
    hits = [k for k in keywords if k.lower() in text_lower]
    return {
        "check": name,
        "passed": bool(hits),
        "detail": f"matched {hits}" if hits else f"none of {keywords} in '{text[:80]}'",
    }


def check_expectations(
    response_data: dict, expectations: dict, expect_error: bool = False
) -> list[dict]:
    """Check a verdict (or error response) against case expectations.

    Returns list of {"check": str, "passed": bool, "detail": str}.
    """
    results = []

    if expect_error:
        expected_status = expectations.get("expected_status")
        if expected_status is not None:
            status = response_data.get("_status_code")
            results.append({
                "check": "expected_status",
                "passed": status == expected_status,
                "detail": f"expected HTTP {expected_status}, got {status}",
            })
        expected_code = expectations.get("expected_error_code")
        if expected_code:
            error_text = response_data.get("_error", "")
            passed = expected_code in error_text
            results.append({
                "check": "expected_error_code",
                "passed": passed,
                "detail": f"expected '{expected_code}' in response"
                + ("" if passed else f", got: {error_text[:80]}"),
            })
        return results

    expect_valid = expectations.get("expect_valid")
    if expect_valid is not None:
        is_valid = response_data.get("isValid")
        results.append({
            "check": "is_valid",
            "passed": is_valid == expect_valid,
            "detail": f"{is_valid} (expected {expect_valid})",
        })

    if expectations.get("require_prompt_requirement"):
        requirement = response_data.get("promptRequirement", "")
        results.append({
            "check": "prompt_requirement",
            "passed": bool(requirement.strip()),
            "detail": f"'{requirement[:60]}'",
        })

    min_violations = expectations.get("min_violations")
    if min_violations is not None:
        count = len(response_data.get("errors", []))
        results.append({
            "check": "min_violations",
            "passed": count >= min_violations,
            "detail": f"{count} (expected >= {min_violations})",
        })

    rule_keywords = expectations.get("expected_rule_keywords")
    if rule_keywords:
        rules_text = " ".join(e.get("rule", "") for e in response_data.get("errors", []))
        results.append(_keyword_check("expected_rule_keywords", rules_text, rule_keywords))

    suggestion_keywords = expectations.get("suggestion_keywords")
    if suggestion_keywords:
        suggestion = response_data.get("suggestion", "")
        results.append(_keyword_check("suggestion_keywords", suggestion, suggestion_keywords))

    return results
