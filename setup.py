"""
Setup script for miaaula-reports.

The report engine behind the miaaula study app. It serves three roles:

1. Report Builder - diagnostic report for every finished attempt
2. Session Aggregator - average mastery/domain gain per study session
3. History & Audit - capped report history, JSON export and a log of
   broken questions for batch correction

The 'miaaula' command exposes the history, export and audit tools.
"""

from setuptools import find_packages, setup

setup(
    name="miaaula-reports",
    version="1.0.0",
    description="Attempt scoring and mastery/domain delta engine for the miaaula study app",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="miaaula",
    packages=find_packages(include=["miaaula", "miaaula.*"]),
    python_requires=">=3.11",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "miaaula=miaaula.cli.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="learning spaced-repetition quiz reports education",
)
