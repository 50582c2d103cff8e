"""Application interfaces (ports): storage, token source and transport."""

from whiteboard.application.interfaces.services import ITokenProvider, ITransport
from whiteboard.application.interfaces.storage import IKeyValueStorage

__all__ = ["IKeyValueStorage", "ITokenProvider", "ITransport"]
