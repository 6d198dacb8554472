"""Setup script for the Oura connector library and ouractl CLI."""

from setuptools import find_packages, setup

setup(
    name="oura-connector",
    version="0.1.0",
    description="Async client for the Oura Ring API v2 with OAuth2 and webhook support",
    author="Oura Connector contributors",
    packages=find_packages(include=["oura_connector", "oura_connector.*"]),
    py_modules=["ouractl"],
    install_requires=[
        "httpx>=0.27.0",
        "pydantic>=2.0.0",
        "python-dateutil>=2.8.0",
        "python-dotenv>=1.0.0",
        "typer>=0.9.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "ouractl=ouractl:app",
        ],
    },
    python_requires=">=3.11",
    license="MIT",
)
