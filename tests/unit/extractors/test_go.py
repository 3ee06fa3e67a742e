"""
Go extractor tests
"""

import pytest

from codegraph_depgraph.extractors import GoExtractor
from codegraph_depgraph.models import EdgeKind, NodeKind
from tests.helpers import find_edge, names


@pytest.fixture
def extractor():
    return GoExtractor()


class TestDeclarations:
    def test_struct(self, parse, extractor):
        fragment = parse(extractor, "package main\n\ntype UserService struct {\n  Name string\n}\n", "user.go")

        assert [(n.name, n.kind, n.file, n.line) for n in fragment.nodes] == [
            ("UserService", NodeKind.CLASS, "user.go", 3)
        ]

    def test_interface(self, parse, extractor):
        fragment = parse(extractor, "package main\n\ntype Repository interface {\n  Save()\n}\n", "repo.go")

        assert [(n.name, n.kind) for n in fragment.nodes] == [("Repository", NodeKind.INTERFACE)]

    def test_multiple_types(self, parse, extractor):
        source = "package main\n\ntype Fetcher interface {}\ntype APIClient struct {}\ntype Cache struct {}\n"
        fragment = parse(extractor, source, "net.go")

        assert names(fragment) == ["APIClient", "Cache", "Fetcher"]

    def test_grouped_type_declaration(self, parse, extractor):
        source = "package main\n\ntype (\n  A struct {}\n  B interface {}\n)\n"
        fragment = parse(extractor, source, "group.go")

        assert names(fragment) == ["A", "B"]

    def test_defined_non_struct_types_are_skipped(self, parse, extractor):
        source = "package main\n\ntype ID string\ntype Handler func(int) error\n"
        fragment = parse(extractor, source, "misc.go")

        assert fragment.nodes == ()


class TestEdges:
    def test_struct_embedding(self, parse, extractor):
        source = "package main\n\ntype Animal struct {}\ntype Dog struct {\n  Animal\n}\n"
        fragment = parse(extractor, source, "animals.go")

        assert len(fragment.nodes) == 2
        edge = find_edge(fragment, "Dog", "Animal")
        assert edge is not None
        assert edge.kind == EdgeKind.EXTENDS

    def test_pointer_embedding(self, parse, extractor):
        source = "package main\n\ntype Base struct {}\ntype Child struct {\n  *Base\n}\n"
        fragment = parse(extractor, source, "embed.go")

        assert find_edge(fragment, "Child", "Base", EdgeKind.EXTENDS)

    def test_interface_embedding(self, parse, extractor):
        source = """package main

type Reader interface {
  Read()
}
type Writer interface {
  Write()
}
type ReadWriter interface {
  Reader
  Writer
}
"""
        fragment = parse(extractor, source, "io.go")

        assert len(fragment.nodes) == 3
        assert find_edge(fragment, "ReadWriter", "Reader", EdgeKind.EXTENDS)
        assert find_edge(fragment, "ReadWriter", "Writer", EdgeKind.EXTENDS)

    def test_field_types(self, parse, extractor):
        source = """package main

type Address struct {}
type Config struct {}
type User struct {
  Addr Address
  Cfg  *Config
  Tags []Tag
  Index map[string]Entry
}
"""
        fragment = parse(extractor, source, "user.go")

        assert find_edge(fragment, "User", "Address", EdgeKind.FIELD_TYPE)
        assert find_edge(fragment, "User", "Config", EdgeKind.FIELD_TYPE)
        assert find_edge(fragment, "User", "Tag", EdgeKind.FIELD_TYPE)
        assert find_edge(fragment, "User", "Entry", EdgeKind.FIELD_TYPE)

    def test_qualified_field_type(self, parse, extractor):
        source = "package main\n\ntype Server struct {\n  Client http.Client\n}\n"
        fragment = parse(extractor, source, "server.go")

        assert find_edge(fragment, "Server", "Client", EdgeKind.FIELD_TYPE)
        assert not find_edge(fragment, "Server", "http")

    def test_method_declaration_param(self, parse, extractor):
        source = "package main\n\ntype Request struct {}\ntype Service struct {}\nfunc (s *Service) Handle(req Request) {}\n"
        fragment = parse(extractor, source, "svc.go")

        assert find_edge(fragment, "Service", "Request", EdgeKind.METHOD_PARAM)

    def test_method_declaration_return(self, parse, extractor):
        source = (
            "package main\n\ntype Result struct {}\ntype Service struct {}\n"
            "func (s Service) Process() Result { return Result{} }\n"
        )
        fragment = parse(extractor, source, "svc.go")

        assert find_edge(fragment, "Service", "Result", EdgeKind.METHOD_RETURN)

    def test_interface_methods(self, parse, extractor):
        source = """package main

type Query struct {}
type Result struct {}
type Database interface {
  Execute(q Query) (Result, error)
}
"""
        fragment = parse(extractor, source, "db.go")

        assert find_edge(fragment, "Database", "Query", EdgeKind.METHOD_PARAM)
        assert find_edge(fragment, "Database", "Result", EdgeKind.METHOD_RETURN)

    def test_builtins_produce_no_edges(self, parse, extractor):
        source = "package main\n\ntype User struct {\n  Name string\n  Age int\n  Active bool\n  Err error\n}\n"
        fragment = parse(extractor, source, "user.go")

        assert fragment.edges == ()

    def test_plain_functions_produce_nothing(self, parse, extractor):
        source = "package main\n\ntype Input struct {}\nfunc helper(i Input) Input { return i }\n"
        fragment = parse(extractor, source, "helper.go")

        assert names(fragment) == ["Input"]
        assert fragment.edges == ()
