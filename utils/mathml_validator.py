"""Well-formedness checks for MathML pasted by the user."""
from __future__ import annotations

import html
import re
import xml.etree.ElementTree as ET
from typing import List, Tuple

MAX_NESTING_DEPTH = 64

# Named HTML entities (&nbsp;, &alpha;, ...) are not known to an XML parser
_NAMED_ENTITY_RE = re.compile(r"&([A-Za-z][A-Za-z0-9]*);")
_XML_ENTITIES = {"amp", "lt", "gt", "quot", "apos"}


def validate_mathml(mathml: str) -> Tuple[bool, List[str]]:
    """
    Validate MathML structure and return issues found.

    Args:
        mathml: MathML string to validate

    Returns:
        Tuple of (is_valid, list_of_issues)
    """
    issues: List[str] = []

    if not mathml or not mathml.strip():
        return False, ["MathML is empty"]

    try:
        root = ET.fromstring(_resolve_html_entities(mathml))
    except ET.ParseError as e:
        issues.append(f"XML parse error: {e}")
        return False, issues

    if _local_name(root.tag) != "math":
        issues.append(f"Invalid root element: {root.tag}")

    depth = _max_depth(root)
    if depth > MAX_NESTING_DEPTH:
        issues.append(f"Nesting depth {depth} exceeds {MAX_NESTING_DEPTH}")

    return len(issues) == 0, issues


def _resolve_html_entities(markup: str) -> str:
    def replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in _XML_ENTITIES:
            return match.group(0)
        decoded = html.unescape(match.group(0))
        return decoded if decoded != match.group(0) else match.group(0)

    return _NAMED_ENTITY_RE.sub(replace, markup)


def _local_name(tag: str) -> str:
    return tag.split("}")[-1] if "}" in tag else tag


def _max_depth(element: ET.Element) -> int:
    deepest = 1
    stack = [(element, 1)]
    while stack:
        node, depth = stack.pop()
        deepest = max(deepest, depth)
        stack.extend((child, depth + 1) for child in node)
    return deepest
