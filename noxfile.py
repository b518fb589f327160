import nox

nox.options.sessions = [
    "format",
    "lint",
    "typecheck",
    "test",
]
# Create fresh isolated environments using uv backend
nox.options.reuse_existing_virtualenvs = False
nox.options.default_venv_backend = "uv"


@nox.session(python="3.12")
def fix(session: nox.Session) -> None:
    """Format and fix code issues."""
    session.install("black", "isort", "ruff")
    session.run("black", "itipcheck/", "noxfile.py", "setup.py")
    session.run("isort", "--profile", "black", "itipcheck/")
    session.run("ruff", "check", "--fix", "itipcheck/")


@nox.session(python="3.12")
def format(session: nox.Session) -> None:
    """Check code formatting."""
    session.install("black", "isort")
    session.run("black", "--check", "--diff", "itipcheck/")
    session.run("isort", "--profile", "black", "--check-only", "--diff", "itipcheck/")


@nox.session(python="3.12")
def lint(session: nox.Session) -> None:
    """Run linting."""
    session.install("ruff")
    session.run("ruff", "check", "itipcheck/")


@nox.session(python="3.12")
def typecheck(session: nox.Session) -> None:
    """Run type checking."""
    session.install("mypy", "pydantic")
    session.install("-e", ".")
    session.run("mypy", "itipcheck", "--ignore-missing-imports")


@nox.session(python="3.12")
def test(session: nox.Session) -> None:
    """Run the test suite."""
    session.install("-e", ".[test]")
    session.run("pytest", "itipcheck/", "-v", "-r", "fE", "--disable-warnings")


@nox.session(python="3.12")
def test_cov(session: nox.Session) -> None:
    """Run tests with coverage."""
    session.install("-e", ".[test]")
    session.run(
        "pytest",
        "itipcheck/",
        "--cov=itipcheck",
        "--cov-report=xml:coverage.xml",
        "-r",
        "fE",
        "--disable-warnings",
    )
