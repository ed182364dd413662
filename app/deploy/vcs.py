"""Version-control collaborator backed by GitPython.

A working copy is acquired either by a shallow single-branch clone of the
remote or, when that fails, by initializing an empty repository and
registering the remote. Credentials travel in the HTTPS remote URL, so
anything derived from git output must go through `redact` before it is shown.
"""

from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlsplit, urlunsplit

from git import Actor, Repo
from git.remote import PushInfo

from app.deploy.errors import PushError

REMOTE_NAME = "origin"
TOKEN_USERNAME = "x-access-token"
REDACTED = "***"

# Never block on an interactive credential prompt
GIT_ENV = {"GIT_TERMINAL_PROMPT": "0"}


@dataclass(frozen=True)
class CommitIdentity:
    name: str
    email: str


def with_credential(url: str, token: str) -> str:
    """Return `url` carrying `token` as HTTPS credentials; non-HTTP URLs are returned as-is."""
    parts = urlsplit(url)
    if parts.scheme not in {"http", "https"} or not token:
        return url
    host = parts.hostname or ""
    if parts.port:
        host = f"{host}:{parts.port}"
    return urlunsplit(parts._replace(netloc=f"{TOKEN_USERNAME}:{token}@{host}"))


def redact(text: str, token: str | None) -> str:
    """Replace every occurrence of `token` in `text`."""
    if not token:
        return text
    return text.replace(token, REDACTED)


class GitWorkingCopy:
    """A local repository receiving replayed commits before push."""

    def __init__(self, repo: Repo) -> None:
        self.repo = repo
        self.repo.git.update_environment(**GIT_ENV)

    @property
    def path(self) -> Path:
        return Path(self.repo.working_tree_dir)

    @classmethod
    def clone(cls, remote_url: str, path: Path, token: str, depth: int = 1) -> "GitWorkingCopy":
        """Shallow, single-branch clone of `remote_url` into `path`.

        Raises:
            git.GitCommandError: If the clone fails (missing repo, bad credential, network)
        """
        repo = Repo.clone_from(
            with_credential(remote_url, token),
            path,
            env=GIT_ENV,
            depth=depth,
            single_branch=True,
        )
        return cls(repo)

    @classmethod
    def init(cls, path: Path, remote_url: str, token: str, initial_branch: str) -> "GitWorkingCopy":
        """Initialize an empty repository at `path` with `remote_url` registered as origin."""
        repo = Repo.init(path, initial_branch=initial_branch)
        repo.create_remote(REMOTE_NAME, with_credential(remote_url, token))
        return cls(repo)

    def stage(self, relative_path: str) -> None:
        self.repo.index.add([relative_path])

    def commit(self, message: str, identity: CommitIdentity, timestamp: int) -> str:
        """Create a commit whose author and committer dates are `timestamp` at UTC.

        Returns:
            Hex SHA of the new commit
        """
        actor = Actor(identity.name, identity.email)
        git_date = f"{timestamp} +0000"
        commit = self.repo.index.commit(
            message,
            author=actor,
            committer=actor,
            author_date=git_date,
            commit_date=git_date,
            skip_hooks=True,
        )
        return commit.hexsha

    def current_branch(self) -> str | None:
        """Return the checked-out branch name, or None on a detached HEAD."""
        try:
            return self.repo.active_branch.name
        except TypeError:
            return None

    def push(self, branch: str) -> None:
        """Push `branch` to the same-named branch on origin.

        Raises:
            PushError: If the remote rejects the update
            git.GitCommandError: If git itself fails (auth, network)
        """
        results = self.repo.remote(REMOTE_NAME).push(refspec=f"{branch}:{branch}")
        for info in results:
            if info.flags & PushInfo.ERROR:
                raise PushError(branch, info.summary.strip() or "remote rejected the update")
        if not results:
            raise PushError(branch, "no ref was updated")
