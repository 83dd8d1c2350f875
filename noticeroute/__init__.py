"""noticeroute: rule-driven reformatting and routing of IRC server notices.

Server notices are matched against an ordered table of regular expression
rules loaded from a plain-text data file.  Each matching notice is
rewritten through the rule's display template and printed to the windows
the rule names:
  - ordered, first-match-wins rules with opt-in CONTINUEMATCH
  - per-network rule scoping and multi-network window name-spacing
  - ``devnull`` discard rules and ``active`` window routing
  - atomic reload of the rule table
  - HTTPS bootstrap of the data file
"""

__version__ = "0.1.0"
__description__ = "Rule-driven reformatting and window routing for IRC server notices"

from noticeroute.core.reformatter import Reformatter
from noticeroute.cli.app import app as cli

__all__ = ["Reformatter", "cli", "__version__"]
