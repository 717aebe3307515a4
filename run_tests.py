#!/usr/bin/env python3
"""
Test runner script for Hacker Logic.

This script provides convenient ways to run different types of tests
with various configurations and reporting options.
"""

import os
import sys
import subprocess
import argparse
from pathlib import Path

SOURCE_DIRS = ["hacker_logic/", "tests/"]


def run_command(cmd, description="", env=None):
    """Run a command and handle errors."""
    print(f"\n{'='*60}")
    if description:
        print(f"Running: {description}")
    print(f"Command: {' '.join(cmd)}")
    print('='*60)

    try:
        subprocess.run(cmd, check=True, capture_output=False, env=env)
        print(f"\n✅ {description or 'Command'} completed successfully")
        return True
    except subprocess.CalledProcessError as e:
        print(f"\n❌ {description or 'Command'} failed with exit code {e.returncode}")
        return False
    except FileNotFoundError:
        print(f"\n❌ Command not found: {cmd[0]}")
        return False


def run_unit_tests(verbose=False, coverage=False):
    """Run unit tests (everything not marked as integration)."""
    cmd = [sys.executable, "-m", "pytest", "tests/", "-m", "not integration"]

    if verbose:
        cmd.append("-v")

    if coverage:
        cmd.extend(["--cov=hacker_logic", "--cov-report=term-missing", "--cov-report=html"])

    return run_command(cmd, "Unit Tests")


def run_integration_tests(verbose=False):
    """Run integration tests that spawn the real MCP server."""
    cmd = [sys.executable, "-m", "pytest", "tests/", "-m", "integration"]

    if verbose:
        cmd.append("-v")

    env = dict(os.environ, TEST_INTEGRATION="true")
    return run_command(cmd, "Integration Tests", env=env)


def run_all_tests(verbose=False, coverage=False):
    """Run all tests."""
    cmd = [sys.executable, "-m", "pytest", "tests/"]

    if verbose:
        cmd.append("-v")

    if coverage:
        cmd.extend(["--cov=hacker_logic", "--cov-report=term-missing", "--cov-report=html"])

    return run_command(cmd, "All Tests", env=dict(os.environ, TEST_INTEGRATION="true"))


def run_specific_test(test_path, verbose=False):
    """Run a specific test file or test function."""
    cmd = [sys.executable, "-m", "pytest", test_path]

    if verbose:
        cmd.append("-v")

    return run_command(cmd, f"Specific Test: {test_path}")


def run_linting():
    """Run code linting."""
    success = True

    if not run_command([sys.executable, "-m", "black", "--check", *SOURCE_DIRS], "Black Formatting Check"):
        success = False

    if not run_command([sys.executable, "-m", "ruff", "check", *SOURCE_DIRS], "Ruff Linting"):
        success = False

    return success


def run_type_checking():
    """Run type checking."""
    return run_command([sys.executable, "-m", "pyright", "hacker_logic/"], "Type Checking")


def install_dependencies():
    """Install the package with test and dev dependencies."""
    return run_command([sys.executable, "-m", "pip", "install", "-e", ".[test,dev]"], "Installing Dependencies")


def main():
    """Main function."""
    parser = argparse.ArgumentParser(description="Test runner for Hacker Logic")

    parser.add_argument(
        "command",
        choices=["unit", "integration", "all", "lint", "type-check", "install", "specific"],
        help="Test command to run"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    parser.add_argument(
        "-c", "--coverage",
        action="store_true",
        help="Run with coverage reporting"
    )

    parser.add_argument(
        "-t", "--test-path",
        help="Specific test path (for 'specific' command)"
    )

    args = parser.parse_args()

    # Paths above are relative to the project root
    os.chdir(Path(__file__).parent)

    if args.command == "unit":
        success = run_unit_tests(args.verbose, args.coverage)

    elif args.command == "integration":
        success = run_integration_tests(args.verbose)

    elif args.command == "all":
        success = run_all_tests(args.verbose, args.coverage)

    elif args.command == "specific":
        if not args.test_path:
            print("❌ --test-path is required for 'specific' command")
            sys.exit(1)
        success = run_specific_test(args.test_path, args.verbose)

    elif args.command == "lint":
        success = run_linting()

    elif args.command == "type-check":
        success = run_type_checking()

    else:
        success = install_dependencies()

    if success:
        print(f"\n🎉 {args.command.title()} completed successfully!")
        sys.exit(0)
    else:
        print(f"\n💥 {args.command.title()} failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
