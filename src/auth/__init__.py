"""Authorization Package.

Exports:
    Actor: An authenticated caller and its capabilities
    TokenAuthorizer: Maps API tokens from config.yml to actors
"""
from .authorizer import Actor, TokenAuthorizer

__all__ = ["Actor", "TokenAuthorizer"]
