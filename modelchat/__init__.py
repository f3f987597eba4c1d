"""modelchat - authenticated chat backend relaying to a local inference service."""

__version__ = "0.1.0"
