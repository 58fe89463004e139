import pytest
from pydantic import ValidationError

from leetsync.models.config import Credentials, RetryConfig, SyncConfig, SyncSettings
from leetsync.models.repository import AuthorIdentity, Checkpoint, RepositoryPointer
from leetsync.models.submission import (
    EnrichedSubmission,
    QuestionDetail,
    SubmissionDetail,
    SubmissionRef,
)


def make_credentials(**overrides):
    fields = dict(
        github_token="ghp_test",
        repo_owner="ada",
        repo_name="leetcode",
        leetcode_session="session",
        leetcode_csrf_token="csrf",
    )
    fields.update(overrides)
    return Credentials(**fields)


def test_settings_defaults():
    settings = SyncSettings()

    assert settings.page_size == 20
    assert settings.page_delay_seconds == 1.0
    assert settings.commit_scan_depth == 100
    assert settings.verify_source_order is True
    assert settings.dry_run is False
    assert settings.retry == RetryConfig(max_retries=5, base=3.0, max_delay_seconds=300)


def test_credentials_reject_empty_values():
    with pytest.raises(ValidationError):
        make_credentials(github_token="")


@pytest.mark.parametrize("owner", ["ada/x", " ada", "ada "])
def test_credentials_reject_malformed_owner(owner):
    with pytest.raises(ValidationError):
        make_credentials(repo_owner=owner)


def test_repo_full_name():
    assert make_credentials().repo_full_name == "ada/leetcode"


def test_sync_config_forbids_unknown_keys():
    with pytest.raises(ValidationError):
        SyncConfig(credentials=make_credentials(), schedule=[])


def test_submission_ref_accepted():
    ref = SubmissionRef(id="1", title_slug="two-sum", timestamp=10, status_display="Accepted")
    rejected = SubmissionRef(
        id="2", title_slug="two-sum", timestamp=11, status_display="Time Limit Exceeded"
    )

    assert ref.is_accepted
    assert not rejected.is_accepted


def test_merge_takes_timestamp_from_detail():
    ref = SubmissionRef(id="7", title_slug="two-sum", timestamp=100)
    detail = SubmissionDetail(
        lang="python3",
        timestamp=101,
        code="pass",
        runtime_display="1 ms",
        memory_display="2 MB",
    )
    question = QuestionDetail(
        title="Two Sum", content="<p>x</p>", difficulty="Easy", tags=["Array"]
    )

    merged = EnrichedSubmission.merge(ref, detail, question, question_body="x")

    assert merged.id == "7"
    assert merged.slug == "two-sum"
    assert merged.title == "Two Sum"
    assert merged.timestamp == 101
    assert merged.question_body == "x"
    assert merged.tags == ["Array"]
    assert merged.generated_readme == ""


def test_enriched_submission_is_frozen():
    submission = EnrichedSubmission(
        id="1",
        slug="s",
        title="S",
        lang="c",
        timestamp=1,
        code="",
        question_body="",
        difficulty="Easy",
    )

    with pytest.raises(ValidationError):
        submission.code = "changed"


def test_pointer_advance_returns_new_pointer():
    pointer = RepositoryPointer(default_branch="main", tree_sha="t1", commit_sha="c1")

    advanced = pointer.advance(tree_sha="t2", commit_sha="c2")

    assert advanced == RepositoryPointer(default_branch="main", tree_sha="t2", commit_sha="c2")
    assert pointer.tree_sha == "t1"
    with pytest.raises(ValidationError):
        pointer.commit_sha = "c3"


def test_checkpoint_defaults_to_full_sync():
    checkpoint = Checkpoint(author=AuthorIdentity(name="Ada", email="ada@example.com"))

    assert checkpoint.resume_timestamp == 0
    assert checkpoint.commit_sha is None
