"""Re-export the model client interface shared by all providers."""

from .base import ModelClient, AssistantTurn, ClientError

__all__ = [
    "ModelClient",
    "AssistantTurn",
    "ClientError",
]
