"""Setup configuration for Strawhat Discord Bot."""

from setuptools import setup, find_packages

setup(
    name="strawhat",
    version="1.2.0",
    description="A Discord bot for One Piece episode and chapter lookups",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.11",
    install_requires=[
        "py-cord>=2.5",
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "PyYAML>=6.0",
        "python-dotenv>=1.0",
        "prompt_toolkit>=3.0",
        "typer>=0.12",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "strawhat=strawhat.main:main",
            "strawhat-refresh-commands=strawhat.scripts.refresh_commands:app",
        ],
    },
)
