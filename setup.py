#!/usr/bin/env python3
"""
Setup script for the Variant Density figure.
"""

from setuptools import setup, find_packages

if __name__ == "__main__":
    setup(
        name="variant-density",
        version="1.0.0",
        description="Binned variant density along a genome overlaid on CDS annotations",
        author="Bioinformatics Team",
        author_email="team@example.com",
        packages=find_packages(where="src"),
        package_dir={"": "src"},
        python_requires=">=3.9",
        install_requires=[
            "numpy>=1.26.0",
            "pandas>=2.1.0",
            "pydantic>=2.5.0",
            "pydantic-settings>=2.1.0",
            "structlog>=23.2.0",
            "click>=8.0.0",
            "rich>=13.0.0",
            "matplotlib>=3.8.0",
            "seaborn>=0.13.0",
            "biopython>=1.81",
        ],
        extras_require={
            "dev": [
                "pytest>=7.4.0",
                "pytest-cov>=4.1.0",
                "pytest-mock>=3.12.0",
                "black>=23.11.0",
                "flake8>=6.1.0",
                "mypy>=1.7.0",
            ],
        },
        entry_points={
            "console_scripts": [
                "variant-density=variant_density.cli:main",
            ],
        },
        classifiers=[
            "Development Status :: 4 - Beta",
            "Intended Audience :: Science/Research",
            "License :: OSI Approved :: MIT License",
            "Programming Language :: Python :: 3",
            "Programming Language :: Python :: 3.9",
            "Programming Language :: Python :: 3.10",
            "Programming Language :: Python :: 3.11",
            "Topic :: Scientific/Engineering :: Bio-Informatics",
        ],
    )
