"""Allow running as ``python -m jira_changelog``."""

from jira_changelog.cli import main

if __name__ == "__main__":
    main()
