from pathlib import Path

from setuptools import find_packages
from setuptools import setup


HERE = Path(__file__).resolve().parent


def get_long_description():
    readme = HERE / "README.md"
    if readme.exists():
        return readme.read_text(encoding="utf-8")
    return ""


setup(
    name="tracebridge",
    version="0.1.0",
    description="Trace web framework router dispatch events with a distributed tracer",
    long_description=get_long_description(),
    long_description_content_type="text/markdown",
    license="BSD-3-Clause",
    packages=find_packages(exclude=["tests*", "benchmarks*", "scripts*"]),
    python_requires=">=3.8",
    install_requires=[
        "attrs>=20",
        "envier~=0.6",
        "ddtrace>=3.0",
    ],
    extras_require={
        "signals": ["blinker>=1.4"],
        "flask": ["flask>=2.0", "blinker>=1.4"],
        "test": [
            "blinker>=1.4",
            "flask>=2.0",
            "mock",
            "pytest",
            "pytest-mock",
            "pytest-cov",
        ],
    },
    zip_safe=False,
    classifiers=[
        "Programming Language :: Python",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
    ],
)
