#!/usr/bin/env python3.14
# SPDX-License-Identifier: Apache-2.0

"""
Test harness for sol integration tests.
Finds all .sol files under tests/integration/, runs each program in-process,
and verifies the expected outcome / output / error message.
"""

import io
import os
import re
import sys
from pathlib import Path

from sol.driver import run_source

TESTS_DIR = Path(__file__).parent / "tests" / "integration"


def parse_test_file(path: Path):
    """Extract the expected outcome, output, and error pattern from the file's first comment block."""
    content = path.read_text(encoding="utf-8")
    lines = content.splitlines()

    header_lines = []
    for line in lines:
        line = line.strip()
        if line.startswith("//"):
            header_lines.append(line[2:].strip())
        else:
            break

    expected = {
        "exit_code": None,
        "error_kind": None,
        "output": None,
        "repeat": 1,
        "error_pattern": None,
    }
    output_lines = []
    for line in header_lines:
        # EXPECTED: exit_code=...
        m = re.match(r"EXPECTED:\s*exit_code=(\d+)", line, re.IGNORECASE)
        if m:
            expected["exit_code"] = int(m.group(1))
            continue
        m = re.match(r"EXPECTED:\s*error=(\w+)", line, re.IGNORECASE)
        if m:
            expected["error_kind"] = m.group(1)
            expected["exit_code"] = 1
            continue
        m = re.match(r"OUTPUT:\s?(.*)", line, re.IGNORECASE)
        if m:
            output_lines.append(m.group(1))
            continue
        m = re.match(r"REPEAT:\s*(\d+)", line, re.IGNORECASE)
        if m:
            expected["repeat"] = int(m.group(1))
            continue
        m = re.match(r"ERROR:\s*(.*)", line, re.IGNORECASE)
        if m:
            expected["error_pattern"] = m.group(1).strip()
            continue

    if output_lines:
        expected["output"] = "".join(line + "\n" for line in output_lines) * expected["repeat"]
    return expected


def run_test(test_path: Path):
    """Run a single integration test and return (success, message)."""
    expected = parse_test_file(test_path)
    out = io.StringIO()
    outcome = run_source(
        test_path.read_text(encoding="utf-8"), out, filename=str(test_path)
    )
    exit_code = 0 if outcome.ok else 1

    if expected["exit_code"] is not None and exit_code != expected["exit_code"]:
        return False, f"Exit code {exit_code} != expected {expected['exit_code']} ({outcome!r})"

    if expected["error_kind"] is not None and outcome.kind != expected["error_kind"]:
        return False, f"Error kind {outcome.kind} != expected {expected['error_kind']}"

    if expected["error_pattern"]:
        if outcome.ok or expected["error_pattern"] not in str(outcome.error):
            return (
                False,
                f"Expected error pattern {expected['error_pattern']!r} not found in {outcome!r}",
            )

    # Output written before a failure must still be there.
    if expected["output"] is not None:
        got = out.getvalue()
        if got != expected["output"]:
            return False, f"Output mismatch:\n  got:  {got!r}\n  want: {expected['output']!r}"

    return True, "OK"


def main():
    tests = sorted(TESTS_DIR.rglob("*.sol"))
    if not tests:
        print("No integration tests found.")
        return 1

    failed = 0
    for test in tests:
        rel = os.path.relpath(str(test), start=str(Path.cwd()))
        print(f"TEST {rel} ... ", end="", flush=True)
        ok, msg = run_test(test)
        if ok:
            print("PASS")
        else:
            print("FAIL")
            print(f"  {msg}")
            failed += 1

    if failed:
        print(f"\n{len(tests) - failed} passed, {failed} failed")
        return 1
    print(f"\nAll {len(tests)} tests passed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
