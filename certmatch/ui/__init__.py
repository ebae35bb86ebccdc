"""Terminal UI package for certmatch.

Example:
    >>> from certmatch.ui import MatchTUI
    >>> tui = MatchTUI()
    >>> tui.display_results(matches)
"""

from .match_tui import MatchTUI, ReviewDecision

__all__ = ["MatchTUI", "ReviewDecision"]
