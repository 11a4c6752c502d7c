"""Tests for containment resolution, prop flows and depth."""

from __future__ import annotations

from compgraph.graph import GraphAssembler, containment_depth, order_components
from tests._fixtures.components import make_component, prop


def test_children_resolve_to_component_ids() -> None:
    app = make_component("App", refs=["Header", "Missing"])
    header = make_component("Header", "src/Header.tsx", props=[prop("title")])

    graph = GraphAssembler().assemble([app, header])

    assert graph.component("src/App.tsx#App").children == ("src/Header.tsx#Header",)
    assert graph.component("src/Header.tsx#Header").children == ()
    assert [(flow.source, flow.target, flow.prop_name) for flow in graph.flows.props] == [
        ("src/App.tsx#App", "src/Header.tsx#Header", "title")
    ]


def test_same_file_component_is_preferred() -> None:
    page = make_component("Page", "src/b/Page.tsx", refs=["Button"])
    local = make_component("Button", "src/b/Page.tsx")
    other = make_component("Button", "src/a/Button.tsx")

    graph = GraphAssembler().assemble([page, local, other])

    assert graph.component("src/b/Page.tsx#Page").children == ("src/b/Page.tsx#Button",)


def test_ambiguous_reference_resolves_to_smallest_id() -> None:
    page = make_component("Page", "src/Page.tsx", refs=["Button"])
    first = make_component("Button", "src/z/Button.tsx")
    second = make_component("Button", "src/a/Button.tsx")

    graph = GraphAssembler().assemble([page, first, second])

    assert graph.component("src/Page.tsx#Page").children == ("src/a/Button.tsx#Button",)


def test_mutual_containment_emits_flows_both_ways() -> None:
    a = make_component("A", "src/A.tsx", refs=["B"], props=[prop("fromB")])
    b = make_component("B", "src/B.tsx", refs=["A"], props=[prop("fromA")])

    graph = GraphAssembler().assemble([b, a])

    assert [(flow.source, flow.target, flow.prop_name) for flow in graph.flows.props] == [
        ("src/A.tsx#A", "src/B.tsx#B", "fromA"),
        ("src/B.tsx#B", "src/A.tsx#A", "fromB"),
    ]
    assert containment_depth(graph.components, cap=7) == 7


def test_resolution_does_not_mutate_input() -> None:
    app = make_component("App", refs=["Child"])
    child = make_component("Child")

    GraphAssembler().assemble([app, child])

    assert app.children == ()


def test_order_components_sorts_by_file_and_keeps_first_record() -> None:
    late = make_component("Late", "src/z.tsx")
    second = make_component("Second", "src/a.tsx")
    first = make_component("First", "src/a.tsx")
    duplicate = make_component("Late", "src/z.tsx", props=[prop("ignored")])

    ordered = order_components([late, second, first, duplicate])

    assert [component.id for component in ordered] == ["src/a.tsx#Second", "src/a.tsx#First", "src/z.tsx#Late"]
    assert ordered[2].props == ()


def test_assembly_is_independent_of_input_order() -> None:
    components = [
        make_component("App", "src/App.tsx", refs=["List"]),
        make_component("List", "src/List.tsx", refs=["Item"], props=[prop("items", "Item[]")]),
        make_component("Item", "src/Item.tsx", props=[prop("label")]),
    ]
    assembler = GraphAssembler()

    forward = assembler.assemble(components)
    backward = assembler.assemble(list(reversed(components)))

    assert forward == backward


def test_containment_depth_counts_edges() -> None:
    graph = GraphAssembler().assemble(
        [
            make_component("App", "src/App.tsx", refs=["List"]),
            make_component("List", "src/List.tsx", refs=["Item"]),
            make_component("Item", "src/Item.tsx"),
            make_component("Lonely", "src/Lonely.tsx"),
        ]
    )

    assert containment_depth(graph.components) == 2
    assert containment_depth([]) == 0
    assert containment_depth(graph.components, cap=1) == 1
