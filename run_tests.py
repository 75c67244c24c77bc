import subprocess
import sys
import os

TEST_ENV = {
    "DATABASE_URL": "sqlite+aiosqlite:///./test.db",
    "SECRET_KEY": "test-secret-key-for-testing-only-min-32-chars",
    "DEBUG": "true",
    "ENVIRONMENT": "testing",
    "RATE_LIMIT_ENABLED": "false",
    "CACHE_ENABLED": "false",
}

# Pure-function suites that need neither the app nor a database.
UNIT_SUITES = ["app/tests/test_exchange_lifecycle.py", "app/tests/test_post_catalog.py"]


def _check_root() -> bool:
    if not os.path.exists("app"):
        print("❌ Error: Please run this script from the project root directory")
        print("   (Should contain app/ folder)")
        return False
    return True


def _pytest(targets: list[str], *extra: str) -> int:
    command = [sys.executable, "-m", "pytest", *targets, "-v", "--tb=short", *extra]
    print(f"🚀 Running command: {' '.join(command)}")
    print("-" * 60)
    return subprocess.run(command, env={**os.environ, **TEST_ENV}, timeout=300).returncode


def run_tests():
    """Run the whole suite, stopping at the first failure."""

    print("🧪 Starting Mutual Aid Network Tests...")
    print("=" * 60)

    if not _check_root():
        return 1

    try:
        returncode = _pytest(["app/tests/"], "--disable-warnings", "-x")
    except subprocess.TimeoutExpired:
        print("\n⏰ Tests timed out after 5 minutes")
        return 1
    except KeyboardInterrupt:
        print("\n🛑 Tests interrupted by user")
        return 1

    if returncode == 0:
        print("\n🎉 All tests passed!")
    else:
        print(f"\n❌ Tests failed with exit code {returncode}")
    return returncode


def run_single_test(test_name):
    if not _check_root():
        return 1

    test_path = f"app/tests/test_{test_name}.py"
    if not os.path.exists(test_path):
        print(f"❌ Test file {test_path} not found")
        available_tests = [
            f.replace("test_", "").replace(".py", "")
            for f in sorted(os.listdir("app/tests"))
            if f.startswith("test_") and f.endswith(".py") and f != "test_utils.py"
        ]
        print(f"Available tests: {', '.join(available_tests)}")
        return 1

    print(f"🧪 Running single test: {test_name}")
    print("=" * 40)

    return _pytest([test_path], "--disable-warnings")


def run_unit_tests():
    print("⚙️  Running exchange lifecycle and catalog unit tests...")
    return _pytest(UNIT_SUITES)


if __name__ == "__main__":
    if len(sys.argv) > 1:
        if sys.argv[1] == "unit":
            exit_code = run_unit_tests()
        else:
            exit_code = run_single_test(sys.argv[1])
    else:
        exit_code = run_tests()

    sys.exit(exit_code)
