"""
Setup script for algebra

Pure Python package using the src/ layout. Version is read from
src/algebra/__init__.py.
"""

from pathlib import Path
from setuptools import setup, find_packages


# Read version from src/algebra/__init__.py
def get_version():
    version_file = Path("src/algebra/__init__.py")
    if version_file.exists():
        for line in version_file.read_text().splitlines():
            if line.startswith("__version__"):
                return line.split("=")[1].strip().strip('"').strip("'")
    return "0.1.0"


# Read long description from README
def get_long_description():
    readme = Path("README.md")
    if readme.exists():
        return readme.read_text(encoding="utf-8")
    return ""


setup(
    name="algebra",
    version=get_version(),
    description="Thread-safe dense 2-D matrices",
    long_description=get_long_description(),
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.20",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "algebra-demo=algebra.cli:main",
        ],
    },
    zip_safe=True,
)
