"""Questions shared by several units.

Declared once so the README and the GitHub repository describe the same
project; the run-wide answer record makes sure each is asked only once.
"""

from __future__ import annotations

from github_repo_scaffold.prompting import Question

REPO_OWNER = Question(
    key="repo_owner",
    prompt="Which user or organization owns this repository?",
    default="chiubaka",
)

REPO_NAME = Question(
    key="repo_name",
    prompt="What is the name of this repository and package?",
    default="generated-typescript-package",
)

PACKAGE_DESCRIPTION = Question(
    key="package_description",
    prompt="What is the description of this new package?",
    default="A TypeScript package generated by github-repo-scaffold",
)
