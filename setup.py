# setup.py
from setuptools import setup, find_packages

setup(
    name="sierrha",
    version="0.1.0",
    description="Custom error pages with cache-aside fetching and localized fallback",
    packages=find_packages(include=["sierrha", "sierrha.*"]),
    package_data={"sierrha": ["templates/*.j2", "resources/*.yaml"]},
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "click>=8.1",
        "jinja2>=3.1",
        "pydantic>=2.5",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
        ],
    },
    entry_points={
        "console_scripts": ["sierrha=sierrha.cli:cli"],
    },
    python_requires=">=3.11",
)
