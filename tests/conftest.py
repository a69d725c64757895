"""Pytest configuration for the cash-jar-planner test suite."""

# Async MCP server tests run through pytest-asyncio with explicit asyncio marks
pytest_plugins = ('pytest_asyncio',)


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "asyncio: mark test as an async test"
    )
