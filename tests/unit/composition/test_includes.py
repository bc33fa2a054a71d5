"""Tests for include scanning, graph building and cycle detection."""
import pytest

from strata.core.composition import (
    CyclicIncludeError,
    DocumentLoader,
    IncludeResolver,
    OverrideMerger,
    UnresolvedIncludeError,
)
from strata.core.composition.includes import iter_include_tokens
from strata.core.layers import Layer


def _merged(*sources):
    return OverrideMerger().merge(DocumentLoader().load(list(sources)))


class TestScan:
    def test_edges_in_body_order_with_raw_line_numbers(self):
        merged = _merged(
            (Layer.BASE, "a", "---\nname: a\n---\nintro\n{include:b}\ntext {include: c }"),
            (Layer.BASE, "b", "B"),
            (Layer.BASE, "c", "C"),
        )
        edges = IncludeResolver().scan(merged["a"])
        assert [(e.target, e.line) for e in edges] == [("b", 5), ("c", 6)]
        assert all(e.source == "a" for e in edges)

    def test_tokens_do_not_span_lines_or_nest(self):
        tokens = [t for _, t in iter_include_tokens("{include:a\nb} {include:{x}} {include:ok}")]
        assert tokens == ["ok"]


class TestResolve:
    def test_graph_nodes_and_edges(self):
        graph = IncludeResolver().resolve(
            _merged(
                (Layer.BASE, "b", "{include:c}"),
                (Layer.BASE, "a", "{include:b}{include:c}"),
                (Layer.BASE, "c", "leaf"),
            )
        )
        assert graph.nodes == ("a", "b", "c")
        assert graph.targets("a") == ["b", "c"]
        assert graph.targets("c") == []
        assert "a" in graph
        assert "missing" not in graph

    def test_unresolved_include(self):
        with pytest.raises(UnresolvedIncludeError) as exc:
            IncludeResolver().resolve(_merged((Layer.BASE, "a", "x\n{include:nope}")))
        assert exc.value.target == "nope"
        assert exc.value.referenced_by == "a"
        assert exc.value.line == 2

    def test_includes_resolve_against_effective_documents(self):
        # Only the override references "extra"; the base text is shadowed.
        merged = _merged(
            (Layer.BASE, "a", "{include:gone}"),
            (Layer.LOCAL_OVERRIDE, "a", "{include:extra}"),
            (Layer.EXTENSION, "extra", "E"),
        )
        graph = IncludeResolver().resolve(merged)
        assert graph.targets("a") == ["extra"]

    def test_self_include_is_a_cycle(self):
        with pytest.raises(CyclicIncludeError) as exc:
            IncludeResolver().resolve(_merged((Layer.BASE, "a", "{include:a}")))
        assert exc.value.cycle == ["a"]

    def test_two_node_cycle(self):
        with pytest.raises(CyclicIncludeError) as exc:
            IncludeResolver().resolve(
                _merged((Layer.BASE, "a", "{include:b}"), (Layer.BASE, "b", "{include:a}"))
            )
        assert exc.value.cycle == ["a", "b"]
        assert str(exc.value) == "Circular include detected: a -> b -> a"

    def test_reported_cycle_is_deterministic(self):
        sources = [
            (Layer.BASE, "z", "{include:y}"),
            (Layer.BASE, "y", "{include:x}"),
            (Layer.BASE, "x", "{include:z}"),
            (Layer.BASE, "entry", "{include:y}"),
        ]
        seen = set()
        for order in (sources, list(reversed(sources))):
            with pytest.raises(CyclicIncludeError) as exc:
                IncludeResolver().resolve(_merged(*order))
            seen.add(tuple(exc.value.cycle))
        assert seen == {("y", "x", "z")}

    def test_diamond_is_not_a_cycle(self):
        graph = IncludeResolver().resolve(
            _merged(
                (Layer.BASE, "a", "{include:b}{include:c}"),
                (Layer.BASE, "b", "{include:d}"),
                (Layer.BASE, "c", "{include:d}"),
                (Layer.BASE, "d", "D"),
            )
        )
        assert len(graph.edges) == 4
