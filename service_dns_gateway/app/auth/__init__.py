from .token import TokenAuthenticator

__all__ = ["TokenAuthenticator"]
