"""Nox sessions for testing and quality assurance."""

import nox

PYTHON_VERSIONS = ["3.12", "3.13"]


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run the full test suite with coverage reporting.

    Args:
        session: The nox session object.
    """
    session.run("uv", "sync", "--extra", "test", external=True)
    session.run(
        "pytest",
        "--cov=save_me_files",
        "--cov-report=term-missing:skip-covered",
        "--cov-fail-under=85",
        *session.posargs,
    )


@nox.session(python=PYTHON_VERSIONS[-1])
def unit(session: nox.Session) -> None:
    """Run only the fast unit tests."""
    session.run("uv", "sync", "--extra", "test", external=True)
    session.run("pytest", "-m", "unit", *session.posargs)


@nox.session(python=PYTHON_VERSIONS[-1])
def lint(session: nox.Session) -> None:
    """Run ruff linting and formatting checks.

    Args:
        session: The nox session object.
    """
    session.run("uv", "sync", external=True)
    session.run("ruff", "check", ".")
    session.run("ruff", "format", "--check", ".")


@nox.session(python=PYTHON_VERSIONS[-1])
def typecheck(session: nox.Session) -> None:
    """Run basedpyright over the package and its tests."""
    session.run("uv", "sync", "--extra", "test", external=True)
    session.run("uvx", "basedpyright@latest", external=True)
