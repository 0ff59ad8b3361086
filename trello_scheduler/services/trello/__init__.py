from trello_scheduler.services.trello.client import TrelloClient
from trello_scheduler.services.trello.config import TrelloConfig

__all__ = ["TrelloClient", "TrelloConfig"]
