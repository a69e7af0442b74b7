"""Agno toolkits provided by chara."""

from .grep import GrepTools

__all__ = ["GrepTools"]
