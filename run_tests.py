#!/usr/bin/env python3
"""
Test runner for a source checkout of shortlink-telemetry.

    python run_tests.py              # every suite
    python run_tests.py telemetry    # schema, codec, extractor, event logger
    python run_tests.py sinks api    # several suites at once

Not installed with the package; it expects the tests/ directory beside it.
"""

import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent

SUITES = {
    "telemetry": [
        "tests/test_schema.py",
        "tests/test_codec.py",
        "tests/test_useragent.py",
        "tests/test_context.py",
        "tests/test_event_logger.py",
    ],
    "sinks": ["tests/test_sink.py"],
    "links": ["tests/test_link_store.py"],
    "api": ["tests/test_links_api.py"],
}


def select_paths(names):
    """Map suite names to test files; no names means the whole tests/ tree"""
    if not names or "all" in names:
        return ["tests/"]

    unknown = [name for name in names if name not in SUITES]
    if unknown:
        raise SystemExit(f"Unknown suite(s): {', '.join(unknown)}. Choose from: all, {', '.join(SUITES)}")

    paths = []
    for name in names:
        paths.extend(path for path in SUITES[name] if path not in paths)
    return paths


def run_tests(names):
    """Run the selected suites with pytest"""
    if not (ROOT / "tests").is_dir():
        print(f"❌ No tests/ directory under {ROOT}; run from a source checkout")
        return 1

    paths = select_paths(names)
    print(f"🧪 Running shortlink tests: {' '.join(names) or 'all'}")
    print("=" * 40)

    result = subprocess.run(
        [sys.executable, "-m", "pytest", *paths, "-v", "--tb=short"],
        cwd=ROOT,
    )

    if result.returncode == 0:
        print("\n✅ All tests passed!")
    else:
        print(f"\n❌ Tests failed with exit code {result.returncode}")
    return result.returncode


if __name__ == "__main__":
    sys.exit(run_tests(sys.argv[1:]))
