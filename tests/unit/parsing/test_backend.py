"""
Backend resolver and grammar cache tests
"""

import threading

import pytest

from codegraph_depgraph.exceptions import GrammarUnavailableError
from codegraph_depgraph.parsing import backend as backend_module
from codegraph_depgraph.parsing.backend import (
    Backend,
    OnceCell,
    create_parser,
    init_portable_runtime,
    load_grammar,
    reset_backend_cache,
    resolve_backend,
)
from codegraph_depgraph.parsing.registry import GRAMMARS, GrammarCache, ParserPool


class TestResolveBackend:
    def test_native_detected_when_binding_installed(self):
        assert resolve_backend() is Backend.NATIVE

    def test_stable_across_calls(self):
        assert resolve_backend() is resolve_backend()

    def test_portable_runtime_exposes_get_language(self):
        assert hasattr(init_portable_runtime(), "get_language")


class TestLoadGrammar:
    def test_native_grammar(self):
        loaded = load_grammar("java", "java", "tree_sitter_java")

        assert loaded.backend is Backend.NATIVE
        assert loaded.language_id == "java"

    def test_missing_native_module_falls_back_to_portable(self):
        loaded = load_grammar("java", "java", "tree_sitter_does_not_exist")

        assert loaded.backend is Backend.PORTABLE

    def test_force_portable(self):
        loaded = load_grammar("go", "go", "tree_sitter_go", force_portable=True)

        assert loaded.backend is Backend.PORTABLE

    def test_no_native_module_uses_portable(self):
        loaded = load_grammar("swift", "swift", None)

        assert loaded.backend is Backend.PORTABLE

    def test_unknown_grammar_raises(self):
        with pytest.raises(GrammarUnavailableError) as exc_info:
            load_grammar("klingon", "klingon_does_not_exist", "tree_sitter_klingon")

        assert exc_info.value.grammar == "klingon"

    def test_native_and_portable_grammars_parse(self):
        for force_portable in (False, True):
            loaded = load_grammar("typescript", "typescript", "tree_sitter_typescript", "language_typescript", force_portable)
            parser = create_parser(force_portable=force_portable)
            parser.language = loaded.grammar

            tree = parser.parse(b"class A {}")

            assert tree.root_node.type == "program"


class TestOnceCell:
    def test_concurrent_first_use_initializes_once(self):
        calls = []
        barrier = threading.Barrier(8)

        def factory():
            calls.append(1)
            return object()

        cell = OnceCell(factory)
        results = []

        def worker():
            barrier.wait()
            results.append(cell.get())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(calls) == 1
        assert all(r is results[0] for r in results)

    def test_failure_is_cached(self):
        calls = []

        def factory():
            calls.append(1)
            raise ImportError("no runtime")

        cell = OnceCell(factory)

        for _ in range(3):
            with pytest.raises(ImportError):
                cell.get()
        assert len(calls) == 1

    def test_reset(self):
        values = iter([1, 2])
        cell = OnceCell(lambda: next(values))

        assert cell.get() == 1
        cell.reset()
        assert not cell.is_set
        assert cell.get() == 2

    def test_unusable_native_runtime_selects_portable(self, monkeypatch):
        monkeypatch.setattr(backend_module, "_backend_cell", OnceCell(lambda: Backend.PORTABLE))

        loaded = load_grammar("java", "java", "tree_sitter_java")

        assert loaded.backend is Backend.PORTABLE

    def test_reset_backend_cache_redetects(self):
        first = resolve_backend()
        reset_backend_cache()

        assert not backend_module._backend_cell.is_set
        assert resolve_backend() is first


class TestGrammarCache:
    def test_all_grammars_load(self):
        cache = GrammarCache()

        for name in GRAMMARS:
            assert cache.get(name).language_id == name

    def test_grammar_is_cached(self):
        cache = GrammarCache()

        assert cache.get("go") is cache.get("go")

    def test_swift_comes_from_portable_bundle(self):
        cache = GrammarCache()
        cache.get("swift")
        cache.get("java")

        backends = cache.backends()
        assert backends["java"] is Backend.NATIVE
        assert backends["swift"] is Backend.PORTABLE

    def test_unknown_grammar(self):
        with pytest.raises(GrammarUnavailableError):
            GrammarCache().get("cobol")


class TestParserPool:
    def test_one_parser_per_language(self):
        pool = ParserPool(GrammarCache())

        ts = pool.parser_for("typescript", "typescript")
        tsx = pool.parser_for("typescript", "tsx")
        pool.parser_for("java", "java")

        assert ts is tsx
        assert len(pool) == 2

    def test_rebinding_switches_grammar(self):
        pool = ParserPool(GrammarCache())

        parser = pool.parser_for("typescript", "tsx")
        assert not parser.parse(b"const x = <div />;").root_node.has_error

        parser = pool.parser_for("typescript", "typescript")
        assert parser.parse(b"const x: number = 1;").root_node.type == "program"
