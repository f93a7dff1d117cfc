"""Turning class-based styles into inline ``style`` attributes."""

from __future__ import annotations

import html
import logging
import re
from typing import Iterable, Mapping, Union

from lxml import etree
import lxml.html

logger = logging.getLogger(__name__)

ClassMap = Union[Mapping[str, str], Iterable[tuple[str, str]]]

_RULE_RE = re.compile(r"([^{}]+)\{([^{}]*)\}")
_CLASS_SELECTOR_RE = re.compile(r"^(?:[A-Za-z][A-Za-z0-9]*)?\.([A-Za-z_][A-Za-z0-9_-]*)$")
_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
# One character of a start tag, or a whole quoted attribute value
_TAG_TOKEN = r"""(?:[^<>"']|"[^"]*"|'[^']*')"""


def _pairs(class_map: ClassMap) -> list[tuple[str, str]]:
    if isinstance(class_map, Mapping):
        return list(class_map.items())
    return list(class_map)


def rewrite_classes_to_inline_styles(markup: str, class_map: ClassMap) -> str:
    """Append ``style="…"`` to every start tag whose class equals a mapped name.

    Only an exact ``class="name"`` attribute value matches, so ``s1`` never
    matches ``class="s10"`` or ``class="s1 s2"``. Mappings are applied one
    after the other and are not merged: a tag matched twice ends up with two
    ``style`` attributes. Works on start-tag tokens, so markup that is not
    well formed passes through untouched apart from the matched tags.
    """
    for class_name, declarations in _pairs(class_map):
        pattern = re.compile(
            r"(<[A-Za-z]" + _TAG_TOKEN + r'*?\sclass="' + re.escape(class_name)
            + r'"' + _TAG_TOKEN + r"*?)(\s*/?>)"
        )
        value = html.escape(declarations.strip(), quote=False).replace('"', "&quot;")
        style = f' style="{value}"'
        markup = pattern.sub(lambda m: m.group(1) + style + m.group(2), markup)
    return markup


def parse_css_rules(css: str) -> dict[str, str]:
    """Collect ``{class name: declarations}`` from a style sheet.

    Only ``tag.class`` and ``.class`` selectors are considered; later rules
    for the same class are appended to earlier ones.
    """
    class_map: dict[str, str] = {}
    css = _COMMENT_RE.sub("", css)
    for m in _RULE_RE.finditer(css):
        declarations = m.group(2).strip().rstrip(";").strip()
        for selector in m.group(1).split(","):
            sm = _CLASS_SELECTOR_RE.match(selector.strip())
            if not sm:
                continue
            name = sm.group(1)
            if name in class_map and class_map[name]:
                class_map[name] = f"{class_map[name]}; {declarations}"
            else:
                class_map[name] = declarations
    return class_map


def extract_class_styles(markup: str) -> dict[str, str]:
    """Read the class map declared in the embedded ``<style>`` blocks of ``markup``."""
    if not markup or not markup.strip():
        return {}
    try:
        root = lxml.html.document_fromstring(markup)
    except (etree.LxmlError, ValueError) as e:
        logger.debug(f"Could not parse markup for style blocks: {e}")
        return {}
    class_map: dict[str, str] = {}
    for style in root.iter("style"):
        for name, declarations in parse_css_rules(style.text or "").items():
            if name in class_map and class_map[name]:
                class_map[name] = f"{class_map[name]}; {declarations}"
            else:
                class_map[name] = declarations
    return class_map


def parse_declarations(style: str) -> dict[str, str]:
    """Split an inline ``style`` value into ``{property: value}``."""
    result: dict[str, str] = {}
    for decl in style.split(";"):
        if ":" not in decl:
            continue
        prop, value = decl.split(":", 1)
        prop = prop.strip().lower()
        if prop:
            result[prop] = value.strip()
    return result
