#!/usr/bin/env python3
"""
Test Runner
===========
Unified test runner for all excel-analyzer tests.
Run with: python run_tests.py [name ...]

Names filter the module list, e.g. `python run_tests.py controller cli`.
"""

import sys
import subprocess
import time
from pathlib import Path

# Test modules to run (in order)
TEST_MODULES = [
    "tests/test_events.py",
    "tests/test_config.py",
    "tests/test_controller.py",
    "tests/test_projection.py",
    "tests/test_progress_hypothesis.py",
    "tests/test_engine.py",
    "tests/test_backend.py",
    "tests/test_cli.py",
    "tests/test_tui.py",
    "tests/test_tui_dialogs.py",
    "tests/test_tui_dashboard.py",
]

def run_test(test_path: str) -> tuple[bool, float]:
    """
    Run a single test module under pytest.
    
    Returns:
        Tuple of (passed, duration_seconds)
    """
    start = time.time()
    result = subprocess.run(
        [sys.executable, "-m", "pytest", "-q", test_path],
        capture_output=True,
        text=True,
        cwd=Path(__file__).parent
    )
    duration = time.time() - start
    
    passed = result.returncode == 0
    
    if not passed:
        print(f"\n{'='*50}")
        print(f"FAILED: {test_path}")
        print(f"{'='*50}")
        print(result.stdout)
        print(result.stderr)
    
    return passed, duration


def select_modules(names: list[str]) -> list[str]:
    """Return the test modules whose file name contains any of ``names``."""
    if not names:
        return TEST_MODULES
    return [path for path in TEST_MODULES if any(name in Path(path).stem for name in names)]


def main(argv: list[str] | None = None):
    """Run the selected tests and report results."""
    modules = select_modules(sys.argv[1:] if argv is None else argv)
    if not modules:
        print("no test modules match the given names")
        return 2

    print("\n" + "="*60)
    print("   EXCEL ANALYZER - TEST SUITE")
    print("="*60 + "\n")
    
    results = []
    total_start = time.time()
    
    for test_path in modules:
        if not Path(test_path).exists():
            print(f"⚠ SKIP: {test_path} (not found)")
            continue
            
        print(f"▸ Running {test_path}...", end=" ", flush=True)
        passed, duration = run_test(test_path)
        
        status = "✓ PASS" if passed else "✗ FAIL"
        print(f"{status} ({duration:.1f}s)")
        
        results.append((test_path, passed, duration))
    
    total_duration = time.time() - total_start
    
    # Summary
    print("\n" + "="*60)
    print("   RESULTS SUMMARY")
    print("="*60)
    
    passed_count = sum(1 for _, p, _ in results if p)
    failed_count = len(results) - passed_count
    
    for test_path, passed, duration in results:
        status = "✓" if passed else "✗"
        name = Path(test_path).stem
        print(f"  {status} {name}: {duration:.1f}s")
    
    print(f"\n  Total: {passed_count} passed, {failed_count} failed")
    print(f"  Duration: {total_duration:.1f}s")
    print("="*60 + "\n")
    
    if failed_count > 0:
        print("❌ TESTS FAILED")
        return 1
    print("✅ ALL TESTS PASSED")
    return 0


if __name__ == "__main__":
    sys.exit(main())
