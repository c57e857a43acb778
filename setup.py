"""
Setup Configuration for descentfit
==================================

Dependency groups, installation options, and entry point configuration.

Key Features:
- Core numerical stack (numpy, scipy) plus PyYAML for configuration files
- Test and development extras (pip install descentfit[test])
- CLI entry point registration
"""

import sys
from pathlib import Path
from setuptools import setup, find_packages

# Get the directory containing setup.py
HERE = Path(__file__).parent.resolve()


def read_readme():
    """Read README file for long description."""
    readme_path = HERE / "README.md"
    if readme_path.exists():
        return readme_path.read_text(encoding="utf-8")
    return "Least-squares curve fitting by steepest descent and conjugate gradients"


def read_version():
    """Read version from descentfit/__init__.py."""
    init_path = HERE / "descentfit" / "__init__.py"
    if init_path.exists():
        with open(init_path, "r") as f:
            for line in f:
                if line.startswith("__version__"):
                    return line.split("=")[1].strip().strip("\"'")
    return "0.1.0"


INSTALL_REQUIRES = [
    "numpy>=1.21.0",
    "scipy>=1.7.0",
    "pyyaml>=5.4.0",
]

EXTRAS_REQUIRE = {
    # Test dependencies
    "test": [
        "pytest>=6.2.0",
        "pytest-cov>=2.12.0",
        "hypothesis>=6.0.0",
    ],
    # Development dependencies
    "dev": [
        "pytest>=6.2.0",
        "pytest-cov>=2.12.0",
        "hypothesis>=6.0.0",
        "black>=21.0.0",
        "ruff>=0.0.290",
        "mypy>=0.910",
    ],
}

EXTRAS_REQUIRE["all"] = sorted(set(sum(EXTRAS_REQUIRE.values(), [])))

ENTRY_POINTS = {
    "console_scripts": [
        "descentfit=descentfit.cli.main:main",
    ]
}

CLASSIFIERS = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Topic :: Scientific/Engineering :: Mathematics",
    "License :: OSI Approved :: MIT License",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Operating System :: OS Independent",
]

KEYWORDS = [
    "curve fitting", "least squares", "conjugate gradient", "steepest descent",
    "bootstrap", "line search", "scientific computing",
]


def check_python_version():
    """Check if Python version is supported."""
    if sys.version_info < (3, 10):
        print("Python 3.10 or higher is required")
        print(f"   Current version: {sys.version}")
        sys.exit(1)


if __name__ == "__main__":
    check_python_version()

    setup(
        name="descentfit",
        version=read_version(),
        description="Least-squares curve fitting by steepest descent and conjugate gradients",
        long_description=read_readme(),
        long_description_content_type="text/markdown",

        packages=find_packages(exclude=["tests*", "docs*", "examples*"]),
        include_package_data=True,

        install_requires=INSTALL_REQUIRES,
        extras_require=EXTRAS_REQUIRE,
        python_requires=">=3.10",

        entry_points=ENTRY_POINTS,

        classifiers=CLASSIFIERS,
        keywords=KEYWORDS,
        license="MIT",

        zip_safe=False,
        platforms=["any"],
    )
