#!/usr/bin/env python3
"""
Repeatability harness: evaluate every role N times; assert identical results.
Exits 0 if stable, 1 if unstable. Prints variance report on failure.
Prints a result hash per role so runs on different machines can be compared.

Usage: python scripts/repeatability_check.py [--runs 10] [--role developer]
"""

import argparse
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from compliance.models import ROLE_TOKENS
from compliance.scoring import evaluate
from compliance.utils import hash_bytes
from compliance.validation import validate_audit_result

DEFAULT_RUNS = 10
# None is the anonymous caller; the unknown token must degrade to no role.
DEFAULT_ROLES = [None, *ROLE_TOKENS, "unknown-role"]


def _result_hash(data: dict) -> str:
    return hash_bytes(json.dumps(data, sort_keys=True).encode("utf-8"))


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--runs", type=int, default=DEFAULT_RUNS)
    parser.add_argument("--role", action="append", dest="roles", help="Role to check (repeatable; default: all)")
    args = parser.parse_args()

    roles = args.roles or DEFAULT_ROLES
    print(f"Evaluating {len(roles)} role(s) {args.runs} times each...")

    variances = []
    firsts = {}
    for role in roles:
        results = []
        for _ in range(args.runs):
            data = evaluate(role).to_dict()
            validate_audit_result(data)
            results.append(data)

        first = results[0]
        firsts[role] = first
        for i, r in enumerate(results[1:], start=1):
            run_num = i + 1
            if r["score"] != first["score"]:
                variances.append((role, run_num, "score", f"{r['score']} != {first['score']}"))
            if r["issues"] != first["issues"]:
                diffs = [
                    (idx, a["message"], b["message"])
                    for idx, (a, b) in enumerate(zip(r["issues"], first["issues"]))
                    if a != b
                ][:5]
                variances.append((role, run_num, "issues", f"first diffs: {diffs}"))

    if variances:
        print("\n=== VARIANCE REPORT ===\n")
        print(f"Runs: {args.runs}")
        for role, run, stage, detail in variances:
            print(f"  Role {role or '(none)'} run {run} - {stage}: {detail}")
        print("\nRepeatability check FAILED.")
        sys.exit(1)

    print("\nPASS: Repeatability check passed.")
    print("\n--- Results ---")
    for role, first in firsts.items():
        stats = first["stats"]
        print(
            f"  {role or '(none)'}: score={first['score']} issues={len(first['issues'])} "
            f"errors={stats['errors']} warnings={stats['warnings']} info={stats['info']} "
            f"hash={_result_hash(first)[:16]}"
        )
    sys.exit(0)


if __name__ == "__main__":
    main()
