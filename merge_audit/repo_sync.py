"""Local clone management used for merge-commit ancestry checks."""

import logging
import os
import shutil
import subprocess
from typing import List

from .errors import MissingPrerequisiteError, RepositorySyncError

GIT_TIMEOUT = 600
ANCESTRY_TIMEOUT = 30


def require_git() -> str:
    """Return the path of the git executable or raise MissingPrerequisiteError."""
    git = shutil.which('git')
    if not git:
        raise MissingPrerequisiteError("Missing dependency: git")
    return git


class RepositorySync:
    """Keeps ``<root>/<repo>`` as an up-to-date, read-only clone."""

    def __init__(self, org: str, repo: str, root: str,
                 clone_url_template: str = 'https://github.com/{org}/{repo}.git'):
        self.org = org
        self.repo = repo
        self.root = root
        self.path = os.path.join(root, repo)
        self.clone_url = clone_url_template.format(org=org, repo=repo)

    def _run(self, args: List[str], cwd: str = None, timeout: int = GIT_TIMEOUT) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(['git'] + args, cwd=cwd, capture_output=True, text=True, timeout=timeout)
        except (subprocess.TimeoutExpired, OSError) as e:
            raise RepositorySyncError(f"git {' '.join(args)} failed: {e}") from e

    def is_cloned(self) -> bool:
        return os.path.isdir(os.path.join(self.path, '.git'))

    def sync(self) -> None:
        """Clone the repository if needed, otherwise fetch all remotes with pruning.

        Raises:
            RepositorySyncError: If git clone or fetch fails
        """
        if not self.is_cloned():
            logging.info(f"Cloning {self.org}/{self.repo} into {self.path} ...")
            os.makedirs(self.root, exist_ok=True)
            result = self._run(['clone', '--quiet', self.clone_url, self.path])
            action = 'clone'
        else:
            logging.info(f"Using existing clone at {self.path}")
            result = self._run(['fetch', '--all', '--prune', '--quiet'], cwd=self.path)
            action = 'fetch'

        if result.returncode != 0:
            raise RepositorySyncError(
                f"git {action} for {self.org}/{self.repo} failed: {result.stderr.strip()}"
            )

    def is_ancestor(self, sha: str, branch: str) -> bool:
        """Check whether sha is reachable from origin/<branch>.

        ``git merge-base --is-ancestor`` exits 0 when it is, 1 when it is not
        and 128 for unknown objects; anything but 0 counts as not an ancestor.
        """
        try:
            result = self._run(['merge-base', '--is-ancestor', sha, f'origin/{branch}'],
                               cwd=self.path, timeout=ANCESTRY_TIMEOUT)
        except RepositorySyncError as e:
            logging.warning(f"Ancestry check for {sha} could not run: {e}")
            return False
        return result.returncode == 0
