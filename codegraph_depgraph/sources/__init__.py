"""
Source Collaborators

Where the files to scan come from: the working tree or a git revision.
"""

from codegraph_depgraph.sources.filesystem import SourceFile, walk_directory
from codegraph_depgraph.sources.git import GitHistorySource

__all__ = ["SourceFile", "walk_directory", "GitHistorySource"]
