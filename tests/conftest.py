"""Pytest fixtures for twig tests"""
import tempfile
from pathlib import Path

import git
import pytest

from twig.config import Config


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def mock_config():
    """Configuration used by tests: no prompts, no hook, no progress output."""
    return Config(assume_yes=True, install_hook=False)


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository on main with a bare 'origin' remote."""
    origin_path = temp_dir / "origin.git"
    git.Repo.init(origin_path, bare=True)

    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()

    # Initialize repository
    repo = git.Repo.init(repo_path)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    # Create initial commit on main branch
    test_file = repo_path / "README.md"
    test_file.write_text("# Test Repository\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")

    # Rename master to main if needed
    repo.git.branch("-M", "main")

    repo.create_remote("origin", str(origin_path))
    repo.git.push("origin", "main")

    yield repo

    # Cleanup
    repo.close()


@pytest.fixture
def git_repo_without_origin(temp_dir):
    """Create a Git repository on main with no remotes."""
    repo_path = temp_dir / "lonely_repo"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    (repo_path / "README.md").write_text("# Lonely\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")
    repo.git.branch("-M", "main")

    yield repo

    repo.close()


@pytest.fixture
def repo_dir(git_repo):
    """Working directory of git_repo as a Path."""
    return Path(git_repo.working_dir)


@pytest.fixture
def add_worktree(git_repo):
    """Return a helper that creates a branch with a worktree directly through git."""
    def _add(branch: str, path: Path) -> Path:
        git_repo.git.worktree("add", "-b", branch, str(path))
        return path.resolve()

    return _add
