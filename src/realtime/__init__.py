from .bridge import RelayBridge
from .session import RelaySession
from .connector import UpstreamConnector
from .upstream import UpstreamConnection

__all__ = ["RelayBridge", "RelaySession", "UpstreamConnection", "UpstreamConnector"]
