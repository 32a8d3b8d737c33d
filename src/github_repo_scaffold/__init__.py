"""GitHub repository scaffolder.

Renders file templates into a new project directory and reconciles the
GitHub side of the project:
- repository settings, branch protection and commit signature protection
- vulnerability alerts
- a fixed label taxonomy (priority, issue type, state)

Work is split into generator units that are composed into a single plan and
run phase by phase.
"""

__version__ = "0.1.0"

from github_repo_scaffold.config import ScaffoldSettings

__all__ = ["__version__", "ScaffoldSettings"]
