"""State layer.

Holds the location sharing flag that the controller, the tracker and any
UI surface read and write.  Consumers receive the holder explicitly; there
is no global lookup.
"""

from tmslocation.state.events import SharingChange, SharingChangeKind
from tmslocation.state.sharing import LocationSharingState, SharingListener, require_sharing_state

__all__ = [
    "LocationSharingState",
    "SharingChange",
    "SharingChangeKind",
    "SharingListener",
    "require_sharing_state",
]
