"""Pytest fixtures for git-worktree-manager tests"""
import tempfile
from pathlib import Path

import git
import pytest

from git_worktree_manager.services.worktree_service import WorktreeService


def _configure_user(repo):
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        # Resolve so paths match what git prints (e.g. /private/var on macOS)
        yield Path(tmpdir).resolve()


@pytest.fixture
def mock_config():
    """Create a configuration dictionary for tests."""
    return {
        'verbose': False,
        'debug': False,
        'command_timeout': 30,
        'workers': 4,
    }


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository with one commit on main."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)
    _configure_user(repo)

    test_file = repo_path / "README.md"
    test_file.write_text("# Test Repository\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")

    # Rename master to main if needed
    try:
        repo.git.branch('-M', 'main')
    except git.exc.GitCommandError:
        pass

    yield repo

    repo.close()


@pytest.fixture
def empty_repo(temp_dir):
    """Create a Git repository without any commits."""
    repo_path = temp_dir / "empty_repo"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)
    _configure_user(repo)

    yield repo

    repo.close()


@pytest.fixture
def git_repo_with_worktree(git_repo, temp_dir):
    """Repository with one linked worktree on branch feature/linked."""
    linked_path = temp_dir / "linked"
    git_repo.git.worktree('add', '-b', 'feature/linked', str(linked_path))
    yield git_repo, linked_path


@pytest.fixture
def service(git_repo, mock_config):
    """WorktreeService rooted at the main checkout of ``git_repo``."""
    svc = WorktreeService(git_repo.working_dir, mock_config)
    yield svc
    svc.close()


@pytest.fixture
def commit_file():
    """Return a helper that writes a file in a checkout and commits it."""
    def _commit(repo_path, name, content, message):
        repo = git.Repo(repo_path)
        try:
            (Path(repo_path) / name).write_text(content)
            repo.index.add([name])
            repo.index.commit(message)
        finally:
            repo.close()
    return _commit
