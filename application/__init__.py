"""
Application layer for the progression service.

This package contains:
- ports/: Repository interfaces (what the use cases need)
- use_cases/: Workflows that load, mutate and persist program instances
- exceptions: Errors shared with the services and infrastructure layers
"""
