"""
Unit tests for local clone management and ancestry checks
"""

import os
import subprocess

import pytest
from unittest.mock import Mock, patch

from merge_audit.errors import MissingPrerequisiteError, RepositorySyncError
from merge_audit.repo_sync import RepositorySync, require_git


def _completed(returncode=0, stderr=''):
    return Mock(returncode=returncode, stdout='', stderr=stderr)


class TestRepositorySync:
    """Test cases for RepositorySync."""

    @pytest.fixture
    def sync(self, tmp_path):
        return RepositorySync('acme', 'api', str(tmp_path))

    @patch('merge_audit.repo_sync.subprocess.run')
    def test_clones_when_missing(self, mock_run, sync, tmp_path):
        mock_run.return_value = _completed()

        sync.sync()

        args = mock_run.call_args.args[0]
        assert args == ['git', 'clone', '--quiet', 'https://github.com/acme/api.git', str(tmp_path / 'api')]

    @patch('merge_audit.repo_sync.subprocess.run')
    def test_fetches_when_present(self, mock_run, sync, tmp_path):
        os.makedirs(tmp_path / 'api' / '.git')
        mock_run.return_value = _completed()

        sync.sync()

        assert mock_run.call_args.args[0] == ['git', 'fetch', '--all', '--prune', '--quiet']
        assert mock_run.call_args.kwargs['cwd'] == str(tmp_path / 'api')

    @patch('merge_audit.repo_sync.subprocess.run')
    def test_clone_failure_raises(self, mock_run, sync):
        mock_run.return_value = _completed(128, 'fatal: repository not found')

        with pytest.raises(RepositorySyncError, match='repository not found'):
            sync.sync()

    @patch('merge_audit.repo_sync.subprocess.run')
    def test_timeout_raises(self, mock_run, sync):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd='git clone', timeout=1)

        with pytest.raises(RepositorySyncError):
            sync.sync()

    def test_custom_clone_url(self, tmp_path):
        sync = RepositorySync('acme', 'api', str(tmp_path), 'git@ghe.example.com:{org}/{repo}.git')
        assert sync.clone_url == 'git@ghe.example.com:acme/api.git'

    @pytest.mark.parametrize('returncode,expected', [(0, True), (1, False), (128, False)])
    @patch('merge_audit.repo_sync.subprocess.run')
    def test_is_ancestor(self, mock_run, returncode, expected, sync):
        mock_run.return_value = _completed(returncode)

        assert sync.is_ancestor('abc123', 'main') is expected
        assert mock_run.call_args.args[0] == ['git', 'merge-base', '--is-ancestor', 'abc123', 'origin/main']

    @patch('merge_audit.repo_sync.subprocess.run')
    def test_is_ancestor_when_git_breaks(self, mock_run, sync):
        mock_run.side_effect = OSError('no git')
        assert sync.is_ancestor('abc123', 'main') is False


class TestRequireGit:
    """Test cases for the git prerequisite check."""

    @patch('merge_audit.repo_sync.shutil.which', return_value=None)
    def test_missing(self, mock_which):
        with pytest.raises(MissingPrerequisiteError):
            require_git()

    @patch('merge_audit.repo_sync.shutil.which', return_value='/usr/bin/git')
    def test_present(self, mock_which):
        assert require_git() == '/usr/bin/git'


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
