# SPDX-License-Identifier: MIT
# Copyright (c) 2025 sentry-reporting contributors

"""Setup configuration for sentry-reporting package."""

from pathlib import Path

from setuptools import find_packages, setup

# Read the README file if it exists
this_directory = Path(__file__).parent
readme_path = this_directory / "README.md"
if readme_path.exists():
    long_description = readme_path.read_text(encoding="utf-8")
else:
    long_description = "Adapter forwarding application errors, messages and breadcrumbs to Sentry"

setup(
    name="sentry-reporting",
    version="0.1.0",
    author="sentry-reporting contributors",
    description="Adapter forwarding application errors, messages and breadcrumbs to Sentry",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.10",
    install_requires=[
        "sentry-sdk>=2.0.0",  # Reporting backend client
        "fastapi>=0.109.0",  # For request/response types in the middleware
        "starlette>=0.49.1",  # For middleware base classes
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "pylint>=3.0.0",
            "mypy>=1.0.0",
            "httpx>=0.27.0",  # For fastapi.testclient
        ],
    },
)
