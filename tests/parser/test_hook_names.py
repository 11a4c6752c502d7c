"""Tests for hook name classification."""

from __future__ import annotations

import pytest

from compgraph.models import HookKind
from compgraph.parser import classify_hook, is_hook_name


@pytest.mark.parametrize(
    ("name", "kind"),
    [
        ("useState", HookKind.STATE),
        ("useReducer", HookKind.REDUCER),
        ("useEffect", HookKind.EFFECT),
        ("useContext", HookKind.CONTEXT),
        ("useMemo", HookKind.OTHER),
        ("useCallback", HookKind.OTHER),
        ("useRef", HookKind.OTHER),
        ("useFetch", HookKind.CUSTOM),
        ("useThemeContext", HookKind.CUSTOM),
    ],
)
def test_classify_hook(name: str, kind: HookKind) -> None:
    assert classify_hook(name) is kind


def test_hook_prefix_is_required() -> None:
    assert is_hook_name("useAnything")
    assert not is_hook_name("fetchUser")
    assert not is_hook_name("UseState")
