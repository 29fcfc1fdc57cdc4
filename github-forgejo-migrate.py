#!/usr/bin/env python3
"""
GitHub Forgejo Migrate - Migrate all repositories of a GitHub user to a
Forgejo instance.

Every repository owned by the GitHub account is created on Forgejo through
its migration API, either as a mirror that Forgejo keeps pulling or as a
one-time clone. With force sync enabled, Forgejo mirrors whose GitHub source
has disappeared are deleted first.
"""

from cli import main

if __name__ == "__main__":
    main()
