"""Call source layer -- where the day's call records come from.

- CallSource: abstract paginated listing plus recording-link construction
- ThreeCClient: the 3C Plus dialer REST API
"""

from src.call_sync.calls.source import CallSource
from src.call_sync.calls.threec import ThreeCClient

__all__ = ["CallSource", "ThreeCClient"]
