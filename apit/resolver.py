"""Placeholder resolution against captured step responses and test params."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence
import json
import re

from .models import CapturedValue, ParamValue

_PARAM_PATTERN = re.compile(r"\{([^{}]+)\}")
_SAVED_DATA_PATTERN = re.compile(r"@@(?P<step>\w+)(?P<path>(?:\.\w+|\.?\[\d+\])*)")
_PATH_TOKEN = re.compile(r"\.?(?:(?P<key>\w+)|\[(?P<index>\d+)\])")

MISSING = object()


def get_value_by_path(value: Any, path: str) -> Any:
    """Traverse ``path`` (``a.b``, ``[0].id``, ``items[1].name``) into ``value``.

    Returns ``MISSING`` when any segment cannot be followed. JSON ``null`` is
    treated as missing as well.
    """

    current = value
    for token in _PATH_TOKEN.finditer(path):
        key, index = token.group("key"), token.group("index")
        if index is not None:
            if not isinstance(current, list):
                return MISSING
            position = int(index)
            if position >= len(current):
                return MISSING
            current = current[position]
        elif isinstance(current, dict):
            if key not in current:
                return MISSING
            current = current[key]
        elif isinstance(current, list) and key.isdigit():
            position = int(key)
            if position >= len(current):
                return MISSING
            current = current[position]
        else:
            return MISSING
        if current is None:
            return MISSING
    return current


def stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return json.dumps(value)


def _param_text(value: ParamValue) -> str:
    resolved = value() if callable(value) else value
    return resolved if isinstance(resolved, str) else str(resolved)


class ValueResolver:
    """Fills ``@@STEP.path`` and ``{param}`` placeholders before a request.

    ``captured`` is the engine's append-only store; it is read, never written.
    """

    def __init__(self, captured: Sequence[CapturedValue]) -> None:
        self._captured = captured

    def lookup(self, step_id: str) -> Optional[CapturedValue]:
        """First captured entry for ``step_id``; later duplicates are ignored."""

        for entry in self._captured:
            if entry.step_id == step_id:
                return entry
        return None

    def resolve_saved_data(self, text: str) -> str:
        """Replace every resolvable ``@@STEP.path`` token inside ``text``."""

        return _SAVED_DATA_PATTERN.sub(self._substitute_saved, text)

    def _substitute_saved(self, match: re.Match[str]) -> str:
        entry = self.lookup(match.group("step"))
        if entry is None:
            return match.group(0)
        path = match.group("path")
        found = get_value_by_path(entry.value, path) if path else entry.value
        if found is MISSING or found is None:
            return match.group(0)
        return stringify(found)

    def resolve_endpoint(self, endpoint: str, params: Optional[Mapping[str, ParamValue]] = None) -> str:
        """Fill the first ``{name}`` of each param, then ``@@`` tokens."""

        if params:
            values = {key: _param_text(value) for key, value in params.items()}
            seen: set[str] = set()

            def _substitute(match: re.Match[str]) -> str:
                name = match.group(1)
                if name not in values or name in seen:
                    return match.group(0)
                seen.add(name)
                return values[name]

            endpoint = _PARAM_PATTERN.sub(_substitute, endpoint)
        return self.resolve_saved_data(endpoint)

    def resolve_body(self, body: Any, params: Optional[Mapping[str, ParamValue]] = None) -> Any:
        """Fill every ``{name}`` occurrence inside the string leaves of ``body``.

        Keys and non-string leaves are left alone; substituted values are strings.
        """

        if not params or body is None:
            return body
        values = {key: _param_text(value) for key, value in params.items()}

        def _substitute(match: re.Match[str]) -> str:
            return values.get(match.group(1), match.group(0))

        def _walk(node: Any) -> Any:
            if isinstance(node, str):
                return _PARAM_PATTERN.sub(_substitute, node)
            if isinstance(node, dict):
                return {key: _walk(item) for key, item in node.items()}
            if isinstance(node, list):
                return [_walk(item) for item in node]
            return node

        return _walk(body)

    def resolve_headers(self, headers: Optional[Mapping[str, str]]) -> dict[str, str]:
        if not headers:
            return {}
        return {name: self.resolve_saved_data(str(value)) for name, value in headers.items()}
