"""Error types for deployment runs.

Any of these ends the run: it is reported once as an error event and never
retried. Clone failures are not errors: they fall back to init.
"""


class DeploymentError(RuntimeError):
    """Base exception for deployment errors."""

    pass


class AcquisitionError(DeploymentError):
    """Raised when neither cloning nor initializing a working copy succeeds."""

    pass


class PushError(DeploymentError):
    """Raised when the remote rejects the push.

    Attributes:
        branch: Branch that was pushed
    """

    def __init__(self, branch: str, reason: str) -> None:
        self.branch = branch
        super().__init__(f"Push of '{branch}' rejected: {reason}")
