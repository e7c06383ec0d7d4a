"""HTTP surface for the case pipeline."""
from caselens.api.app import create_app
from caselens.api.settings import ServerSettings

__all__ = ["create_app", "ServerSettings"]
