"""
Language Extractors

One extractor per supported language; each turns a parsed syntax tree into
a Fragment of type nodes and dependency edges.
"""

from codegraph_depgraph.extractors.base import BaseExtractor, FragmentBuilder
from codegraph_depgraph.extractors.go import GoExtractor
from codegraph_depgraph.extractors.java import JavaExtractor
from codegraph_depgraph.extractors.swift import SwiftExtractor
from codegraph_depgraph.extractors.typescript import TypeScriptExtractor

__all__ = [
    "BaseExtractor",
    "FragmentBuilder",
    "GoExtractor",
    "JavaExtractor",
    "SwiftExtractor",
    "TypeScriptExtractor",
]
