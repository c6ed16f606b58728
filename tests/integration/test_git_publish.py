"""Publishing content edits to a real git repository."""

import subprocess

import pytest

from src.cli.editor import Editor
from src.cli.models import EditorConfig
from src.publish.commit_primitive import GitCommitter
from src.publish.errors import PublishFailedError
from src.publish.publish_gate import PublishGate
from tests.fixtures.git_test_repos import (
    get_commit_count,
    get_latest_commit_files,
    get_latest_commit_message,
    get_latest_commit_sha,
)


@pytest.fixture
def editor(repo, tmp_path):
    config = EditorConfig(
        content_root=str(repo / "src" / "pages"),
        drafts_file=str(tmp_path / "drafts.yaml"),
        repo_root=str(repo),
    )
    return Editor(config)


class TestGitPublish:
    """Publish gate over GitCommitter and a real repository."""

    def test_clean_repo_has_nothing_to_publish(self, editor, repo):
        commits_before = get_commit_count(repo)

        result = editor.publish_gate.publish("msg")

        assert not result.published
        assert get_commit_count(repo) == commits_before

    def test_publishes_all_edited_pages_in_one_commit(self, editor, repo):
        editor.store.set_field("home", "hero.headline", "B")
        editor.store.set_field("about", "intro", "We make better tools.")
        assert editor.publish_gate.status().unpublished_changes == 2

        result = editor.publish_gate.publish("Refresh copy")

        assert result.published
        assert result.files_changed == 2
        assert result.commit_id == get_latest_commit_sha(repo)
        assert get_latest_commit_message(repo) == "Refresh copy"
        assert sorted(get_latest_commit_files(repo)) == [
            "src/pages/about/index.mdx",
            "src/pages/home.mdx",
        ]
        assert editor.publish_gate.status().unpublished_changes == 0

    def test_new_page_is_published(self, editor, repo):
        (repo / "src" / "pages" / "pricing.mdx").write_text(
            "---\nmicrotext:\n  cta: Buy\n---\n", encoding="utf-8"
        )

        result = editor.publish_gate.publish()

        assert result.files == ["src/pages/pricing.mdx"]
        assert result.message.startswith("Content update ")

    def test_files_outside_content_root_are_not_committed(self, editor, repo):
        (repo / "README.md").write_text("# Changed\n", encoding="utf-8")
        editor.store.set_field("home", "hero.headline", "B")

        editor.publish_gate.publish("Content only")

        assert get_latest_commit_files(repo) == ["src/pages/home.mdx"]
        status = subprocess.run(
            ["git", "status", "--porcelain"], cwd=repo, capture_output=True, text=True
        ).stdout
        assert "README.md" in status

    def test_staged_rename_is_published_whole(self, editor, repo):
        subprocess.run(
            ["git", "mv", "src/pages/home.mdx", "src/pages/welcome.mdx"],
            cwd=repo, check=True, capture_output=True,
        )

        result = editor.publish_gate.publish("Rename home")

        assert result.published
        assert editor.publish_gate.status().unpublished_changes == 0
        tree = subprocess.run(
            ["git", "ls-tree", "-r", "--name-only", "HEAD"],
            cwd=repo, capture_output=True, text=True, check=True,
        ).stdout.splitlines()
        assert "src/pages/welcome.mdx" in tree
        assert "src/pages/home.mdx" not in tree

    def test_deleted_page_is_published(self, editor, repo):
        (repo / "src" / "pages" / "about" / "index.mdx").unlink()

        result = editor.publish_gate.publish("Drop about")

        assert result.files == ["src/pages/about/index.mdx"]
        assert get_latest_commit_files(repo) == ["src/pages/about/index.mdx"]
        assert editor.publish_gate.status().unpublished_changes == 0

    def test_not_a_repository(self, tmp_path):
        gate = PublishGate(GitCommitter(str(tmp_path), "."))

        with pytest.raises(PublishFailedError):
            gate.status()
