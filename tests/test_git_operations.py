"""Tests for GitOperations and BranchQueries"""
from pathlib import Path
from unittest.mock import patch

import git
import pytest

from twig.exceptions import (
    BaseBranchNotFoundError,
    DefaultBranchNotFoundError,
    GitOperationError,
    NoOriginRemoteError,
)
from twig.services.git import BranchQueries, GitOperations


class TestGitOperationsInit:
    """Test GitOperations initialization."""

    def test_repo_opened_from_subdirectory(self, repo_dir):
        subdir = repo_dir / "src"
        subdir.mkdir()
        ops = GitOperations(str(subdir))
        assert ops.repo_root() == str(repo_dir)

    def test_not_a_repository(self, temp_dir):
        ops = GitOperations(str(temp_dir))
        with pytest.raises(GitOperationError, match="open_repository"):
            ops.repo_root()

    def test_nonexistent_path(self, temp_dir):
        ops = GitOperations(str(temp_dir / "nonexistent"))
        with pytest.raises(GitOperationError):
            ops._get_repo()


class TestRepositoryLocation:
    """Test locating the repository, its git dir and its name."""

    def test_main_worktree(self, repo_dir):
        ops = GitOperations(str(repo_dir))
        assert ops.git_dir() == str(repo_dir / ".git")
        assert ops.git_common_dir() == str(repo_dir / ".git")
        assert ops.is_linked_worktree() is False
        assert ops.repo_name() == "test_repo"

    def test_linked_worktree(self, repo_dir, temp_dir, add_worktree):
        linked = add_worktree("feature", temp_dir / "elsewhere")
        ops = GitOperations(str(linked))
        assert ops.repo_root() == str(linked)
        assert ops.git_common_dir() == str(repo_dir / ".git")
        assert ops.is_linked_worktree() is True
        assert ops.repo_name() == "test_repo"

    def test_hooks_path_is_shared(self, repo_dir, temp_dir, add_worktree):
        linked = add_worktree("feature", temp_dir / "elsewhere")
        assert GitOperations(str(linked)).git_path("hooks") == str(repo_dir / ".git" / "hooks")
        assert GitOperations(str(repo_dir)).git_path("hooks") == str(repo_dir / ".git" / "hooks")


class TestRefs:
    """Test ref queries and branch commands."""

    def test_show_ref(self, repo_dir):
        ops = GitOperations(str(repo_dir))
        assert ops.show_ref("refs/heads/main") is True
        assert ops.show_ref("refs/heads/nope") is False

    def test_rev_parse(self, git_repo, repo_dir):
        ops = GitOperations(str(repo_dir))
        assert ops.rev_parse("main") == git_repo.head.commit.hexsha

    def test_rev_parse_unknown_ref(self, repo_dir):
        with pytest.raises(GitOperationError, match="rev_parse"):
            GitOperations(str(repo_dir)).rev_parse("nope")

    def test_local_branches(self, git_repo, repo_dir):
        git_repo.git.branch("feature/login")
        assert sorted(GitOperations(str(repo_dir)).local_branches()) == ["feature/login", "main"]

    def test_branch_delete(self, git_repo, repo_dir):
        git_repo.git.branch("temp")
        ops = GitOperations(str(repo_dir))
        ops.branch_delete("temp", force=True)
        assert ops.show_ref("refs/heads/temp") is False

    def test_branch_delete_error_names_branch(self, repo_dir):
        with pytest.raises(GitOperationError) as exc_info:
            GitOperations(str(repo_dir)).branch_delete("missing")
        assert exc_info.value.operation == "delete_branch"
        assert exc_info.value.branch == "missing"


class TestUntrackedFiles:
    """Test listing untracked files."""

    def test_includes_ignored_and_nested_files(self, repo_dir):
        (repo_dir / ".gitignore").write_text(".env\n")
        (repo_dir / ".env").write_text("SECRET=1\n")
        (repo_dir / "build").mkdir()
        (repo_dir / "build" / "out.txt").write_text("x")
        files = GitOperations(str(repo_dir)).untracked_files(str(repo_dir))
        assert sorted(files) == [".env", ".gitignore", "build/out.txt"]

    def test_tracked_files_excluded(self, repo_dir):
        assert GitOperations(str(repo_dir)).untracked_files(str(repo_dir)) == []


class TestBranchQueries:
    """Test branch existence checks and default branch detection."""

    def test_branch_exists(self, repo_dir):
        queries = BranchQueries(GitOperations(str(repo_dir)))
        assert queries.branch_exists("main") is True
        assert queries.branch_exists("nope") is False

    def test_remote_branch_exists(self, repo_dir):
        queries = BranchQueries(GitOperations(str(repo_dir)))
        assert queries.remote_branch_exists("main") is True
        assert queries.remote_branch_exists("nope") is False

    def test_detect_default_branch_main(self, repo_dir):
        assert BranchQueries(GitOperations(str(repo_dir))).detect_default_branch() == "main"

    def test_local_main_beats_local_master(self, git_repo, repo_dir):
        git_repo.git.branch("master")
        assert BranchQueries(GitOperations(str(repo_dir))).detect_default_branch() == "main"

    def test_detect_default_branch_master(self, git_repo_without_origin):
        git_repo_without_origin.git.branch("-M", "master")
        queries = BranchQueries(GitOperations(git_repo_without_origin.working_dir))
        assert queries.detect_default_branch() == "master"

    def test_remote_main_beats_local_master(self, git_repo, repo_dir):
        git_repo.git.branch("-M", "master")
        # origin/main still exists from the fixture push
        assert BranchQueries(GitOperations(str(repo_dir))).detect_default_branch() == "main"

    def test_no_default_branch(self, git_repo_without_origin):
        git_repo_without_origin.git.branch("-M", "trunk")
        queries = BranchQueries(GitOperations(git_repo_without_origin.working_dir))
        with pytest.raises(DefaultBranchNotFoundError, match="Please specify a base branch with --base"):
            queries.detect_default_branch()

    def test_custom_candidates(self, git_repo_without_origin):
        git_repo_without_origin.git.branch("-M", "trunk")
        queries = BranchQueries(GitOperations(git_repo_without_origin.working_dir), ["develop", "trunk"])
        assert queries.detect_default_branch() == "trunk"


class TestEnsureBaseUpToDate:
    """Test fetching and resolving the base branch."""

    def test_returns_remote_sha_after_fetch(self, git_repo, repo_dir, temp_dir):
        # Advance origin/main from a second clone
        other = git.Repo.clone_from(str(temp_dir / "origin.git"), str(temp_dir / "other"), branch="main")
        other.config_writer().set_value("user", "name", "Other").release()
        other.config_writer().set_value("user", "email", "other@example.com").release()
        (Path(other.working_dir) / "new.txt").write_text("new\n")
        other.index.add(["new.txt"])
        new_commit = other.index.commit("Remote change")
        other.git.push("origin", "HEAD:main")
        other.close()

        sha = BranchQueries(GitOperations(str(repo_dir))).ensure_base_up_to_date("main")

        assert sha == new_commit.hexsha
        assert git_repo.head.commit.hexsha != new_commit.hexsha

    def test_no_origin(self, git_repo_without_origin):
        queries = BranchQueries(GitOperations(git_repo_without_origin.working_dir))
        with pytest.raises(NoOriginRemoteError):
            queries.ensure_base_up_to_date("main")

    def test_base_missing_on_origin(self, repo_dir):
        queries = BranchQueries(GitOperations(str(repo_dir)))
        with pytest.raises(BaseBranchNotFoundError, match="'develop' does not exist on origin"):
            queries.ensure_base_up_to_date("develop")

    def test_fetch_failure_is_wrapped(self, repo_dir):
        ops = GitOperations(str(repo_dir))
        queries = BranchQueries(ops)
        with patch.object(ops, "fetch", side_effect=GitOperationError("fetch", message="network down")):
            with pytest.raises(GitOperationError, match="Failed to fetch from origin: network down"):
                queries.ensure_base_up_to_date("main")
