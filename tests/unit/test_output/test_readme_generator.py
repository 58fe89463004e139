"""Tests for the per-problem README generator."""

import yaml

from leetsync.models.submission import EnrichedSubmission
from leetsync.output import ReadmeGenerator


def make_submission(**overrides):
    fields = dict(
        id="101",
        slug="two-sum",
        title="Two Sum",
        lang="python3",
        timestamp=1672531200,
        code="class Solution: pass",
        question_body="Find two numbers.",
        difficulty="Easy",
        tags=["Array", "Hash Table"],
        runtime_display="52 ms",
        memory_display="16.5 MB",
    )
    fields.update(overrides)
    return EnrichedSubmission(**fields)


class TestQuestionToMarkdown:
    """HTML question bodies to markdown."""

    def test_empty_body(self):
        assert ReadmeGenerator().question_to_markdown("") == ""

    def test_converts_inline_markup(self):
        html = "<p>Given an array <code>nums</code>, return <strong>indices</strong>.</p>"

        markdown = ReadmeGenerator().question_to_markdown(html)

        assert markdown == "Given an array `nums`, return **indices**."

    def test_lists_use_dash_bullets(self):
        html = "<ul><li>one</li><li>two</li></ul>"

        markdown = ReadmeGenerator().question_to_markdown(html)

        assert "- one" in markdown
        assert "- two" in markdown

    def test_collapses_blank_line_runs(self):
        html = "<p>First</p><p>&nbsp;</p><p>Second</p>"

        markdown = ReadmeGenerator().question_to_markdown(html)

        assert "\n\n\n" not in markdown
        assert markdown.startswith("First")
        assert markdown.endswith("Second")


class TestGenerate:
    """Full README rendering."""

    def test_frontmatter(self):
        content = ReadmeGenerator().generate(make_submission())

        _, frontmatter, _ = content.split("---", 2)
        data = yaml.safe_load(frontmatter)
        assert data["title"] == "Two Sum"
        assert data["slug"] == "two-sum"
        assert data["difficulty"] == "Easy"
        assert data["tags"] == ["Array", "Hash Table"]
        assert data["language"] == "python3"
        assert data["submission_id"] == "101"
        assert data["date"] == "2023-01-01"

    def test_body_sections(self):
        content = ReadmeGenerator().generate(make_submission())

        assert "# [Two Sum](https://leetcode.com/problems/two-sum/)" in content
        assert "**Difficulty:** Easy" in content
        assert "**Tags:** Array, Hash Table" in content
        assert "**Solved:** 2023-01-01 00:00:00 UTC" in content
        assert "## Problem\n\nFind two numbers." in content
        assert "- **Runtime:** 52 ms" in content
        assert "- **Memory:** 16.5 MB" in content

    def test_missing_fields_fall_back(self):
        content = ReadmeGenerator().generate(
            make_submission(
                question_body="", difficulty="", tags=[], runtime_display=""
            )
        )

        assert "**Difficulty:** Unknown" in content
        assert "**Tags:**" not in content
        assert "_No description available._" in content
        assert "Runtime" not in content
