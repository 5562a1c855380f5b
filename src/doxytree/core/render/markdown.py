"""Print Doxygen description markup as markdown."""

import re
from typing import TYPE_CHECKING
from xml.etree.ElementTree import Element

from doxytree.core.render.links import node_url

if TYPE_CHECKING:
    from doxytree.config import Config
    from doxytree.models.cache import NodeCache

_WHITESPACE = re.compile(r"\s+")

# Elements inside <para> that start a block of their own.
_BLOCK_TAGS = frozenset(
    {
        "itemizedlist",
        "orderedlist",
        "programlisting",
        "verbatim",
        "simplesect",
        "parameterlist",
        "xrefsect",
    }
)

_SECTION_TITLES = {
    "return": "Returns",
    "see": "See also",
    "note": "Note",
    "warning": "Warning",
    "attention": "Attention",
    "since": "Since",
    "version": "Version",
    "author": "Author",
    "authors": "Authors",
    "pre": "Precondition",
    "post": "Postcondition",
    "remark": "Remark",
    "invariant": "Invariant",
    "todo": "Todo",
}

_PARAMETER_TITLES = {
    "param": "Parameters",
    "retval": "Return values",
    "exception": "Exceptions",
    "templateparam": "Template parameters",
}


def plain_text(element: Element | None) -> str:
    """Collapse all text below element into a single line."""
    if element is None:
        return ""
    return _WHITESPACE.sub(" ", "".join(element.itertext())).strip()


def _squash(text: str | None) -> str:
    return _WHITESPACE.sub(" ", text) if text else ""


def _code_text(element: Element) -> str:
    # <sp/> stands for a single space inside program listings
    parts = [element.text or ""]
    for child in element:
        parts.append(" " if child.tag == "sp" else _code_text(child))
        parts.append(child.tail or "")
    return "".join(parts)


class MarkdownPrinter:
    """Turn brief/detailed description elements into markdown text.

    <ref> elements become links to the referenced node. The referenced node
    is looked up through the cache, so an unknown refid raises NodeNotFound.
    """

    def __init__(self, config: "Config") -> None:
        self.config = config

    def print(self, element: Element | None, cache: "NodeCache") -> str:
        if element is None:
            return ""
        blocks = self._blocks(element, cache)
        if not blocks and element.text and element.text.strip():
            blocks.append(_squash(element.text).strip())
        return "\n\n".join(b for b in blocks if b)

    def _blocks(self, element: Element, cache: "NodeCache") -> list[str]:
        blocks: list[str] = []
        for child in element:
            if child.tag == "title":
                continue
            if child.tag in ("sect1", "sect2", "sect3", "sect4"):
                level = int(child.tag[-1]) + 2
                title = plain_text(child.find("title"))
                if title:
                    blocks.append(f"{'#' * level} {title}")
                blocks.extend(self._blocks(child, cache))
            elif child.tag in _BLOCK_TAGS:
                blocks.append(self._block(child, cache))
            else:
                blocks.extend(self._para(child, cache))
        return blocks

    def _para(self, para: Element, cache: "NodeCache") -> list[str]:
        blocks: list[str] = []
        inline = [_squash(para.text)]

        def flush() -> None:
            text = "".join(inline).strip()
            text = re.sub(r"\n +", "\n", text)
            if text:
                blocks.append(text)
            inline.clear()

        for child in para:
            if child.tag in _BLOCK_TAGS:
                flush()
                blocks.append(self._block(child, cache))
            else:
                inline.append(self._inline(child, cache))
            inline.append(_squash(child.tail))
        flush()
        return blocks

    def _inline_children(self, element: Element, cache: "NodeCache") -> str:
        parts = [_squash(element.text)]
        for child in element:
            parts.append(self._inline(child, cache))
            parts.append(_squash(child.tail))
        return "".join(parts)

    def _inline(self, element: Element, cache: "NodeCache") -> str:
        tag = element.tag
        if tag == "linebreak":
            return "  \n"
        inner = self._inline_children(element, cache)
        if tag == "bold":
            return f"**{inner}**"
        if tag == "emphasis":
            return f"*{inner}*"
        if tag == "computeroutput":
            return f"`{inner}`"
        if tag == "ref":
            target = cache.find(element.get("refid", ""))
            return f"[{inner}]({node_url(target, self.config)})"
        if tag == "ulink":
            return f"[{inner}]({element.get('url', '')})"
        return inner

    def _block(self, element: Element, cache: "NodeCache") -> str:
        tag = element.tag
        if tag in ("itemizedlist", "orderedlist"):
            lines = []
            for i, item in enumerate(element.findall("listitem"), start=1):
                bullet = f"{i}." if tag == "orderedlist" else "-"
                body = "\n  ".join(self._blocks(item, cache))
                lines.append(f"{bullet} {body}")
            return "\n".join(lines)

        if tag == "programlisting":
            language = element.get("filename", "").lstrip(".")
            code = "\n".join(_code_text(line) for line in element.findall("codeline"))
            return f"```{language}\n{code}\n```"

        if tag == "verbatim":
            return f"```\n{(element.text or '').strip(chr(10))}\n```"

        if tag == "simplesect":
            kind = element.get("kind", "")
            if kind == "par":
                title = plain_text(element.find("title"))
            else:
                title = _SECTION_TITLES.get(kind, kind.capitalize())
            body = " ".join(self._blocks(element, cache))
            return f"**{title}:** {body}" if title else body

        if tag == "parameterlist":
            title = _PARAMETER_TITLES.get(element.get("kind", ""), "Parameters")
            lines = [f"**{title}:**"]
            for item in element.findall("parameteritem"):
                names = ", ".join(
                    f"`{plain_text(name)}`" for name in item.iter("parametername")
                )
                description = item.find("parameterdescription")
                body = " ".join(self._blocks(description, cache)) if description is not None else ""
                lines.append(f"- {names} {body}".rstrip())
            return "\n".join(lines)

        if tag == "xrefsect":
            title = plain_text(element.find("xreftitle"))
            description = element.find("xrefdescription")
            body = " ".join(self._blocks(description, cache)) if description is not None else ""
            return f"**{title}:** {body}"

        return plain_text(element)
