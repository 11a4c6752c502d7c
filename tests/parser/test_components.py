"""Tests for component recognition on real tree-sitter trees."""

from __future__ import annotations

import pytest

from compgraph.models import ComponentKind, HookKind
from compgraph.parser import ComponentExtractor, ParseFailure, SourceTree


def test_function_component_reads_inline_props_and_defaults(extract) -> None:
    parsed = extract(
        """
        export function Button({ label, size = "md" }: { label: string; size?: "sm" | "md"; onClick: () => void }) {
          return <button>{label}</button>;
        }
        """
    )

    assert [component.name for component in parsed.components] == ["Button"]
    button = parsed.components[0]
    assert button.id == "src/App.tsx#Button"
    assert button.kind is ComponentKind.FUNCTION
    assert button.children == ()

    props = {prop.name: prop for prop in button.props}
    assert list(props) == ["label", "size", "onClick"]
    assert props["label"].type == "string"
    assert props["label"].required is True
    assert props["label"].default is None
    assert props["size"].required is False
    assert props["size"].default == '"md"'
    assert props["onClick"].type == "() => void"


def test_closure_component_resolves_interface_props(extract) -> None:
    parsed = extract(
        """
        interface CardProps {
          title: string;
          footer?: React.ReactNode;
        }

        export const Card = ({ title, footer }: CardProps) => (
          <div>
            <Header title={title} />
            {footer}
          </div>
        );
        """
    )

    card = parsed.components[0]
    assert card.kind is ComponentKind.CLOSURE
    assert [(prop.name, prop.type, prop.required) for prop in card.props] == [
        ("title", "string", True),
        ("footer", "React.ReactNode", False),
    ]
    assert card.markup_refs == ("Header",)


def test_type_alias_intersection_props(extract) -> None:
    parsed = extract(
        """
        type Base = { id: string };
        type RowProps = Base & { selected?: boolean };

        function Row(props: RowProps) {
          return <tr />;
        }
        """
    )

    assert [prop.name for prop in parsed.components[0].props] == ["id", "selected"]


def test_unannotated_or_unknown_props_are_empty(extract) -> None:
    parsed = extract(
        """
        function Plain(props) {
          return <p>{props.text}</p>;
        }

        function Imported(props: ImportedProps) {
          return <p />;
        }
        """
    )

    assert [component.props for component in parsed.components] == [(), ()]


def test_class_components_need_known_base(extract) -> None:
    parsed = extract(
        """
        import React, { PureComponent } from "react";

        type CounterProps = { start: number };

        class Counter extends React.Component<CounterProps> {
          render() {
            return <span>{this.props.start}</span>;
          }
        }

        class Store extends Base {
          render() {
            return <div />;
          }
        }

        export default class Legacy extends PureComponent {
          render() {
            return null;
          }
        }
        """
    )

    assert [(component.name, component.kind) for component in parsed.components] == [
        ("Counter", ComponentKind.CLASS),
        ("Legacy", ComponentKind.CLASS),
    ]
    assert [(prop.name, prop.type) for prop in parsed.components[0].props] == [("start", "number")]


def test_functions_without_markup_are_not_components(extract) -> None:
    parsed = extract(
        """
        function formatDate(value: Date) {
          return value.toISOString();
        }

        const useCounter = () => {
          const [count, setCount] = useState(0);
          return count;
        };

        const Empty = () => null;
        """
    )

    assert parsed.components == ()


def test_first_recognised_declaration_wins(extract) -> None:
    parsed = extract(
        """
        function Panel() {
          return <section />;
        }

        const Panel = () => <div />;
        """
    )

    assert len(parsed.components) == 1
    assert parsed.components[0].kind is ComponentKind.FUNCTION


def test_hooks_are_classified_by_name(extract) -> None:
    parsed = extract(
        """
        function Profile({ userId }: { userId: string }) {
          const [user, setUser] = useState(null);
          const theme = useContext(ThemeContext);
          useEffect(() => {
            load(userId);
          }, [userId]);
          useEffect(() => {});
          useLayoutEffect(() => {}, []);
          const data = useFetch("/api");
          const [state, dispatch] = useReducer(reducer, initial);
          return <div>{user}</div>;
        }
        """
    )

    hooks = parsed.components[0].hooks
    assert [(hook.name, hook.kind) for hook in hooks] == [
        ("useState", HookKind.STATE),
        ("useContext", HookKind.CONTEXT),
        ("useEffect", HookKind.EFFECT),
        ("useEffect", HookKind.EFFECT),
        ("useLayoutEffect", HookKind.OTHER),
        ("useFetch", HookKind.CUSTOM),
        ("useReducer", HookKind.REDUCER),
    ]
    assert hooks[0].bindings == ("user", "setUser")
    assert hooks[0].dependencies is None
    assert hooks[1].argument == "ThemeContext"
    assert hooks[1].bindings == ("theme",)
    assert hooks[2].dependencies == ("userId",)
    assert hooks[3].dependencies is None
    assert hooks[4].dependencies == ()
    assert hooks[6].bindings == ("state", "dispatch")
    assert hooks[6].dependencies is None
    assert hooks[0].span.start.line == 2


def test_event_bindings_and_markup_references(extract) -> None:
    parsed = extract(
        """
        function Form(props: { onBlur: () => void }) {
          const [value, setValue] = useState("");
          return (
            <form onSubmit={handleSubmit}>
              <input onChange={(e) => setValue(e.target.value)} />
              <button onClick={() => { reset(); }}>Reset</button>
              <Field onBlur={props.onBlur} />
              <Field />
            </form>
          );
        }
        """
    )

    form = parsed.components[0]
    assert form.markup_refs == ("Field",)
    assert [(binding.event, binding.handler, binding.element) for binding in form.event_bindings] == [
        ("onSubmit", "handleSubmit", "form"),
        ("onChange", "setValue", "input"),
        ("onClick", "inline", "button"),
        ("onBlur", "props.onBlur", "Field"),
    ]


def test_fragments_count_as_markup(extract) -> None:
    parsed = extract(
        """
        export const List = () => (
          <>
            <Item />
          </>
        );
        """
    )

    assert parsed.components[0].markup_refs == ("Item",)


def test_javascript_dialect_by_suffix(extract) -> None:
    parsed = extract(
        """
        export default function App() {
          return (
            <Layout>
              <Nav />
            </Layout>
          );
        }
        """,
        file_id="src/App.jsx",
    )

    app = parsed.components[0]
    assert app.id == "src/App.jsx#App"
    assert app.markup_refs == ("Layout", "Nav")
    assert app.props == ()


def test_syntax_errors_produce_warning(extract) -> None:
    parsed = extract(
        """
        function Ok() {
          return <div />;
        }

        const = ;
        """
    )

    assert [component.name for component in parsed.components] == ["Ok"]
    assert [(diag.code, diag.severity) for diag in parsed.diagnostics] == [("syntax-error", "warning")]


def test_missing_tree_raises_parse_failure() -> None:
    with pytest.raises(ParseFailure) as excinfo:
        ComponentExtractor().extract(SourceTree(file_id="broken.tsx", tree=None, source=b""))
    assert excinfo.value.file_id == "broken.tsx"


def test_custom_component_bases(source_tree) -> None:
    tree = source_tree(
        """
        class Widget extends LitElement {
          render() {
            return null;
          }
        }
        """
    )

    assert ComponentExtractor().extract(tree).components == ()
    extracted = ComponentExtractor(["LitElement"]).extract(tree)
    assert [component.name for component in extracted.components] == ["Widget"]


def test_walker_faults_become_parse_failures(source_tree, monkeypatch: pytest.MonkeyPatch) -> None:
    from compgraph.parser import components as components_module

    def explode(self, root):  # type: ignore[no-untyped-def]
        raise RecursionError("too deep")

    monkeypatch.setattr(components_module._FileWalker, "components", explode)
    tree = source_tree("const App = () => <div />;\n")

    with pytest.raises(ParseFailure, match="too deep"):
        ComponentExtractor().extract(tree)
