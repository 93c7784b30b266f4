"""Discovery -- find API description files in a repository tree.

Sub-modules:

* :mod:`~specfinder.discovery.patterns` -- candidate filename patterns.
* :mod:`~specfinder.discovery.scanner` -- tree scan plus concurrent
  candidate verification.
"""

from specfinder.discovery.patterns import is_candidate_path, list_candidates
from specfinder.discovery.scanner import resolve_repository, scan_repository

__all__ = [
    "is_candidate_path",
    "list_candidates",
    "resolve_repository",
    "scan_repository",
]
