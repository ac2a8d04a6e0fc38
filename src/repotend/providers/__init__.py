"""Remote discovery: list repositories hosted on GitHub or GitLab."""
