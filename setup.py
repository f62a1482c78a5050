"""Setup script for road_resilience package."""

from setuptools import setup, find_packages

setup(
    name="road_resilience",
    version="1.0.0",
    description="Road network construction, metrics and percolation resilience analysis",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.20",
        "pandas>=1.3",
        "igraph>=0.10",
        "pyyaml>=5.4",
        "click>=8.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "pytest-cov>=4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "road-resilience=road_resilience.cli.main:cli",
        ],
    },
)
