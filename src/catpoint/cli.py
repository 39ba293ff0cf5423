#!/usr/bin/env python3
"""
Catpoint Drill CLI

Runs drill cases against the alarm controller and prints a summary.

Usage:
    catpoint-drills path/to/drills.json
    python -m catpoint.cli path/to/drills.json --tag sensor --log-level DEBUG
"""

import argparse
import logging
import sys
from typing import Optional

from .services.drill_runner import DrillRunner


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Catpoint alarm drill runner")
    parser.add_argument("drills", help="Path to drill JSON file")
    parser.add_argument("--tag", action="append", dest="tags", help="Only run cases with this tag (repeatable)")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    runner = DrillRunner(args.drills)
    results = runner.run_all(tags=args.tags)

    for r in results:
        mark = "PASS" if r.passed else "FAIL"
        print(f"[{mark}] {r.case_id}: alarm={r.final_alarm_status} arming={r.final_arming_status}")
        for failure in r.failures:
            print(f"       - {failure}")

    summary = runner.get_summary(results)
    print(f"\n{summary['passed']}/{summary['total']} passed ({summary['pass_rate']})")
    outcomes = ", ".join(f"{status}={count}" for status, count in summary["final_alarm_status"].items())
    print(f"final alarm status: {outcomes}")

    return 0 if summary["failed"] == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
