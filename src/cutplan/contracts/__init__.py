"""Contracts shared between the application and infrastructure layers."""

from .strategies import PackingStrategyProtocol

__all__ = ["PackingStrategyProtocol"]
