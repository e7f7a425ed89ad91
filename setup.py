"""Setup script for the YouTube playlist MCP server."""

from setuptools import setup, find_namespace_packages

setup(
    name="youtubemcp",
    version="0.1.0",
    description="MCP server and web chat for managing YouTube playlists",
    author="Micah Alpern",
    author_email="malpern@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src"),
    python_requires=">=3.10",
    install_requires=[
        "google-api-python-client>=2.0.0",
        "google-auth>=2.0.0",
        "google-auth-oauthlib>=0.4.0",
        "python-dotenv>=1.0.0",
        "mcp>=1.10.0,<2",
        "openai>=1.0.0",
        "fastapi>=0.100.0",
        "pydantic>=2.0.0",
        "uvicorn>=0.20.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-mock>=3.10.0",
            "httpx>=0.24.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "youtubemcp=youtubemcp.cli:main",
        ]
    },
)
