from .fixture_client import FixtureClient
from .queue_player import QueuePlayer

__all__ = ["FixtureClient", "QueuePlayer"]
