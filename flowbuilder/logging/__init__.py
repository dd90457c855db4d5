"""
Logging Module

Provides the logging entry point for the flow builder client.
"""
from flowbuilder.logging.setup import configure_logging

__all__ = ['configure_logging']
