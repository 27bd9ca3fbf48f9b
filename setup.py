"""Package setup for steamguard."""

from setuptools import setup, find_packages

setup(
    name="steamguard-api",
    version="0.7.1",
    description="Client for the Steam mobile authenticator API: login, sessions, "
                "authenticator enrollment and removal",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "requests>=2.31.0",
        "urllib3>=2.0.0",
    ],
    extras_require={
        "ui": [
            "colorlog>=6.8.0",
        ],
        "test": [
            "pytest>=7.4.0",
        ],
    },
)
