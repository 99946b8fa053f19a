"""
gh-grass - check GitHub contribution counts from the terminal.

Architecture:
- providers.py: domain types, errors and the QueryService protocol
- github_provider.py: QueryService over the GitHub GraphQL API
- session.py: the session state machine (events in, tasks out)
- tasks.py: runs a task against a QueryService
- views/: Textual screen components
- app.py: Textual application wiring it all together
- cli.py: command line entry point
"""

__version__ = "0.1.0"
