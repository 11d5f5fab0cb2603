# type: ignore
from typing import List  # noqa
from typing import Tuple  # noqa

from riot import Venv


latest = ""


SUPPORTED_PYTHON_VERSIONS: List[Tuple[int, int]] = [
    (3, 8),
    (3, 9),
    (3, 10),
    (3, 11),
    (3, 12),
    (3, 13),
]


def version_to_str(version: Tuple[int, int]) -> str:
    """Convert a Python version tuple to a string

    >>> version_to_str((3, 8))
    '3.8'
    >>> version_to_str((3, ))
    '3'
    """
    return ".".join(str(p) for p in version)


def str_to_version(version: str) -> Tuple[int, int]:
    """Convert a Python version string to a tuple

    >>> str_to_version("3.10")
    (3, 10)
    """
    return tuple(int(p) for p in version.split("."))


MIN_PYTHON_VERSION = version_to_str(min(SUPPORTED_PYTHON_VERSIONS))
MAX_PYTHON_VERSION = version_to_str(max(SUPPORTED_PYTHON_VERSIONS))


def select_pys(min_version: str = MIN_PYTHON_VERSION, max_version: str = MAX_PYTHON_VERSION) -> List[str]:
    """Helper to select python versions from the list of versions we support

    >>> select_pys(min_version='3.8', max_version='3.9')
    ['3.8', '3.9']
    """
    min_version = str_to_version(min_version)
    max_version = str_to_version(max_version)

    return [version_to_str(version) for version in SUPPORTED_PYTHON_VERSIONS if min_version <= version <= max_version]


venv = Venv(
    pkgs={
        "mock": latest,
        "pytest": latest,
        "pytest-mock": latest,
        "coverage": latest,
        "pytest-cov": latest,
        "blinker": latest,
    },
    env={
        "TRACEBRIDGE_LOGGING_RATE": "0",
    },
    venvs=[
        Venv(
            name="tracebridge",
            command="pytest {cmdargs} --ignore=tests/contrib tests/",
            pys=select_pys(),
            pkgs={"flask": latest},
        ),
        Venv(
            name="flask",
            command="pytest {cmdargs} tests/contrib/flask",
            venvs=[
                Venv(
                    pys=select_pys(max_version="3.9"),
                    pkgs={"flask": "~=2.0", "werkzeug": "~=2.0"},
                ),
                Venv(
                    pys=select_pys(min_version="3.9"),
                    pkgs={"flask": latest},
                ),
            ],
        ),
        Venv(
            name="datadog",
            command="pytest {cmdargs} tests/contrib/test_datadog.py",
            pys=select_pys(),
            pkgs={"ddtrace": latest},
            env={"DD_TRACE_ENABLED": "false"},
        ),
    ],
)
