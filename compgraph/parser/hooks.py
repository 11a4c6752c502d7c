"""Hook naming conventions."""

from __future__ import annotations

from ..models import HookKind

HOOK_PREFIX = "use"

_KINDS_BY_NAME = {
    "useState": HookKind.STATE,
    "useReducer": HookKind.REDUCER,
    "useEffect": HookKind.EFFECT,
    "useContext": HookKind.CONTEXT,
}

_OTHER_BUILTINS = frozenset(
    {
        "useCallback",
        "useMemo",
        "useRef",
        "useLayoutEffect",
        "useInsertionEffect",
        "useImperativeHandle",
        "useDebugValue",
        "useTransition",
        "useDeferredValue",
        "useId",
        "useSyncExternalStore",
    }
)


def is_hook_name(name: str) -> bool:
    return name.startswith(HOOK_PREFIX)


def classify_hook(name: str) -> HookKind:
    """Return the hook kind for a callee name; unknown hooks are custom."""
    kind = _KINDS_BY_NAME.get(name)
    if kind is not None:
        return kind
    if name in _OTHER_BUILTINS:
        return HookKind.OTHER
    return HookKind.CUSTOM


__all__ = ["HOOK_PREFIX", "classify_hook", "is_hook_name"]
