from .client import FundraiserClient
from .connection import ConnectionManager, FixedDelay, RetryPolicy
from .state import ConnectionState, ConnectionStatus, SessionState

__all__ = [
    "FundraiserClient",
    "ConnectionManager", "FixedDelay", "RetryPolicy",
    "ConnectionState", "ConnectionStatus", "SessionState",
]
