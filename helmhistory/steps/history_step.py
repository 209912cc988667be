"""Helm history build step.

The step a CI job runs: fetch the history of a release, report the
available revisions and the revision selected for rollback. The field
validator and the revision choice populator back the step's form.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional

from ..adapters.helm_adapter import HelmAdapter
from ..errors import HelmError
from ..logging import get_logger, log_step_event
from ..models.revisions import RevisionList
from ..models.validations import FieldValidation

logger = get_logger(__name__)

FUNCTION_NAME = "helmHistory"
DISPLAY_NAME = "Helm History Lookup"

Listener = Callable[[str], None]


def format_revisions(revisions: RevisionList) -> str:
    """Render revisions the way the step log shows them."""
    return "[" + ", ".join(revisions) + "]"


@dataclass(frozen=True)
class HelmHistoryStep:
    """Build step configuration for a helm history lookup."""

    release_name: str
    revision: Optional[str] = field(default=None)
    kubeconfig_path: Optional[str] = field(default=None)

    def perform(self, adapter: Optional[HelmAdapter] = None, listener: Optional[Listener] = None) -> RevisionList:
        """Run the step and return the revisions it found.

        Progress lines go to ``listener``. Launch failures, interruptions
        and timeouts propagate to the caller.
        """
        adapter = adapter or HelmAdapter()
        emit = listener or _discard

        emit(f"Fetching Helm history for release: {self.release_name}")
        log_step_event(logger, self.release_name, "fetch", kubeconfig_path=self.kubeconfig_path)

        revisions = adapter.list_revisions(self.release_name, self.kubeconfig_path)

        emit(f"Available revisions: {format_revisions(revisions)}")
        log_step_event(logger, self.release_name, "revisions", count=len(revisions))

        if self.revision:
            emit(f"Selected revision: {self.revision}")
            emit("Rollback is not implemented; no changes were made")
            log_step_event(logger, self.release_name, "selected", revision=self.revision)

        return revisions


def check_release_name(value: Optional[str]) -> FieldValidation:
    """Validate the release name field."""
    if not value:
        return FieldValidation.error("Release Name Required")
    return FieldValidation.ok()


def fill_revision_items(
    release_name: Optional[str],
    kubeconfig_path: Optional[str] = None,
    adapter: Optional[HelmAdapter] = None
) -> List[str]:
    """Populate the revision choices for a release.

    Never raises on helm failures; the choice list is simply empty.
    """
    if not release_name:
        return []

    adapter = adapter or HelmAdapter()

    try:
        return adapter.list_revisions(release_name, kubeconfig_path)
    except HelmError as e:
        logger.warning(
            "Could not fill revision choices",
            release_name=release_name,
            error=str(e)
        )
        return []


def _discard(line: str) -> None:
    pass
