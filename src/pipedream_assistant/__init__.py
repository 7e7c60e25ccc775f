"""Pipedream Assistant - browser and API automation for Pipedream projects and workflows."""

__version__ = "0.1.0"
