"""
helmhistory: Helm release history lookup for CI build steps

helmhistory wraps `helm history` to:
- List the revisions of a release in a fixed namespace
- Report them from a CI build step, together with a selected rollback target
- Populate revision choices for the step's form

Usage:
    from helmhistory import HelmAdapter

    revisions = HelmAdapter().list_revisions("my-release", "~/.kube/config")

    # Or use CLI:
    $ helmhistory run my-release --revision 3
"""

__version__ = "0.1.0"

# Core functionality
from .config import get_settings
from .logging import get_logger

from .adapters.helm_adapter import HelmAdapter
from .steps.history_step import HelmHistoryStep

__all__ = ["HelmAdapter", "HelmHistoryStep", "get_settings", "get_logger", "__version__"]
