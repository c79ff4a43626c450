from __future__ import annotations

from enum import Enum


class Outcome(str, Enum):
    """Result of a controller operation.

    Every failure in the control core is recoverable and local, so callers get
    one of these back instead of an exception.
    """

    OK = "ok"
    NOT_FOUND = "not_found"
    MALFORMED_CONTENT = "malformed_content"
    UNRESOLVABLE_NAVIGATION = "unresolvable_navigation"
    HISTORY_BOUNDARY = "history_boundary"
