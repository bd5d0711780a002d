"""
Setup for the repair_shop package
"""

from setuptools import setup, find_packages

setup(
    name="repair-shop-manager",
    version="0.1.0",
    description="Service tickets, reports, Telegram notifications and thermal labels for an electronics repair shop",
    packages=find_packages(include=["repair_shop", "repair_shop.*"]),
    install_requires=[
        "pydantic>=2.5.0",
        "pydantic-settings>=2.1.0",
        "structlog>=24.1.0",
        "python-dateutil>=2.8.2",
        "httpx>=0.26.0",
        "redis>=5.0.1",
        "cryptography>=41.0.0",
        "fastapi>=0.109.0",
        "uvicorn>=0.27.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.23.0",
            "pytest-mock>=3.12.0",
        ],
    },
    python_requires=">=3.10",
)
