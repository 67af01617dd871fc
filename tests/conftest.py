"""Pytest configuration shared by all test packages."""

pytest_plugins = ["pytester", "expectly.pytest_plugin"]
