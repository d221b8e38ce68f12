from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Optional, Sequence


def normalize(name: str) -> str:
    return name.strip().lower()


def is_blank(value: Any) -> bool:
    """Null, empty string, or a nested container (not a field value)."""
    return value is None or value == "" or isinstance(value, (dict, list))


def to_text(value: Any) -> str:
    """Render a JSON scalar the way it reads on a form field."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def clean(value: Any) -> str:
    """Trimmed string form of an optional form value ('' when missing)."""
    if value is None:
        return ""
    return to_text(value).strip()


def digits_only(value: Any) -> str:
    return re.sub(r"\D", "", clean(value))


def key_variants(key: str) -> List[str]:
    """Spellings probed before any scan: as given, without '#', with a
    single leading '#', then the lower-cased form of each."""
    stripped = key.replace("#", "")
    hashed = f"#{stripped}"
    variants = [key, stripped, hashed]
    variants += [v.lower() for v in variants]
    return variants


def resolve_value(blob: Any, key: str, fuzzy: bool = True) -> Optional[str]:
    """Find the value stored under any real-world spelling of `key`.

    Fixed variants are probed in order first. Failing that, every key of
    the blob is scanned case-insensitively for equality, equality once '#'
    is stripped, or (when `fuzzy`) containment of the stripped key.
    Returns None when nothing non-empty matches.
    """
    if not isinstance(blob, dict):
        return None

    for variant in key_variants(key):
        value = blob.get(variant)
        if not is_blank(value):
            return to_text(value)

    key_l = normalize(key)
    stripped_l = normalize(key.replace("#", ""))
    if not stripped_l:
        return None
    for candidate, value in blob.items():
        if is_blank(value):
            continue
        cand_l = normalize(str(candidate))
        if (
            cand_l == key_l
            or cand_l.replace("#", "") == stripped_l
            or (fuzzy and stripped_l in cand_l)
        ):
            return to_text(value)
    return None


def resolve_first(blob: Any, keys: Iterable[str], fuzzy: bool = True) -> Optional[str]:
    """First hit across several canonical names, in the order given."""
    for key in keys:
        value = resolve_value(blob, key, fuzzy=fuzzy)
        if value is not None:
            return value
    return None


def get_path(blob: Any, path: Sequence[Any]) -> Any:
    """Walk dict keys / list indexes; None as soon as a step is missing."""
    node = blob
    for step in path:
        if isinstance(step, int):
            if not isinstance(node, list) or not -len(node) <= step < len(node):
                return None
            node = node[step]
        else:
            if not isinstance(node, dict):
                return None
            node = node.get(step)
        if node is None:
            return None
    return node


def envelopes(blob: Any) -> List[Dict[str, Any]]:
    """The blob itself followed by the `data` / `data.data` envelopes the
    carrier relay wraps responses in."""
    out: List[Dict[str, Any]] = []
    node = blob
    for _ in range(3):
        if not isinstance(node, dict):
            break
        out.append(node)
        node = node.get("data")
    return out


def dedupe(values: Iterable[str]) -> List[str]:
    seen = set()
    out = []
    for v in values:
        if v not in seen:
            seen.add(v)
            out.append(v)
    return out
