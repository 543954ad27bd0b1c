from ideaboard.client.board_client import BoardClientError, HttpBoardClient

__all__ = ['BoardClientError', 'HttpBoardClient']
