from datetime import datetime, timezone
import yaml
from markdownify import markdownify

from leetsync.models.submission import EnrichedSubmission


class ReadmeGenerator:
    """Generates the per-problem README committed next to each solution"""

    PROBLEM_URL = "https://leetcode.com/problems/{slug}/"

    def question_to_markdown(self, html: str) -> str:
        """Convert a LeetCode question body from HTML to markdown"""
        if not html:
            return ""
        markdown = markdownify(html, heading_style="ATX", bullets="-")
        # Collapse the blank-line runs markdownify leaves between blocks
        lines = [line.rstrip() for line in markdown.splitlines()]
        collapsed = []
        for line in lines:
            if not line and collapsed and not collapsed[-1]:
                continue
            collapsed.append(line)
        return "\n".join(collapsed).strip()

    def generate(self, submission: EnrichedSubmission) -> str:
        """Generate complete README content"""
        solved_at = datetime.fromtimestamp(submission.timestamp, tz=timezone.utc)

        # 1. Frontmatter
        frontmatter = {
            "title": submission.title,
            "slug": submission.slug,
            "difficulty": submission.difficulty,
            "tags": list(submission.tags),
            "language": submission.lang,
            "submission_id": submission.id,
            "date": solved_at.strftime("%Y-%m-%d"),
        }

        md_lines = []
        md_lines.append("---")
        md_lines.append(yaml.dump(frontmatter, sort_keys=False, allow_unicode=True).strip())
        md_lines.append("---\n")

        # 2. Header
        url = self.PROBLEM_URL.format(slug=submission.slug)
        md_lines.append(f"# [{submission.title}]({url})\n")
        md_lines.append(f"**Difficulty:** {submission.difficulty or 'Unknown'}")
        if submission.tags:
            md_lines.append(f"**Tags:** {', '.join(submission.tags)}")
        md_lines.append(
            f"**Solved:** {solved_at.strftime('%Y-%m-%d %H:%M:%S UTC')}\n"
        )

        # 3. Question
        md_lines.append("## Problem\n")
        md_lines.append(submission.question_body or "_No description available._")
        md_lines.append("")

        # 4. Submission stats
        md_lines.append("## Submission\n")
        md_lines.append(f"- **Language:** {submission.lang}")
        if submission.runtime_display:
            md_lines.append(f"- **Runtime:** {submission.runtime_display}")
        if submission.memory_display:
            md_lines.append(f"- **Memory:** {submission.memory_display}")

        return "\n".join(md_lines) + "\n"
