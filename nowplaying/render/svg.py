from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

SVG_NS = "http://www.w3.org/2000/svg"
XML_DECL = '<?xml version="1.0" encoding="UTF-8"?>'


def esc(text: Any = "") -> str:
    return (
        str(text)
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def fmt_num(value: Union[int, float]) -> str:
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, int) or float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")


def _attr_value(value: Any) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return fmt_num(value)
    return esc(value)


def _attr_name(name: str) -> str:
    # stroke_width -> stroke-width; trailing "_" libera palavras reservadas (class_)
    return name.rstrip("_").replace("_", "-")


@dataclass
class Node:
    tag: str
    attrs: Dict[str, Any] = field(default_factory=dict)
    children: List["Node"] = field(default_factory=list)
    text: Optional[str] = None

    def add(self, *nodes: Optional["Node"]) -> "Node":
        self.children.extend(n for n in nodes if n is not None)
        return self

    def to_xml(self, indent: int = 0) -> str:
        pad = "  " * indent
        attrs = "".join(
            f' {_attr_name(k)}="{_attr_value(v)}"'
            for k, v in self.attrs.items()
            if v is not None
        )
        if self.text is None and not self.children:
            return f"{pad}<{self.tag}{attrs}/>"
        if not self.children:
            return f"{pad}<{self.tag}{attrs}>{esc(self.text)}</{self.tag}>"

        inner = "\n".join(c.to_xml(indent + 1) for c in self.children)
        return f"{pad}<{self.tag}{attrs}>\n{inner}\n{pad}</{self.tag}>"


def el(tag: str, *children: Optional[Node], text: Optional[str] = None, **attrs: Any) -> Node:
    return Node(tag=tag, attrs=attrs, children=[c for c in children if c is not None], text=text)


def document(root: Node) -> str:
    return f"{XML_DECL}\n{root.to_xml()}\n"
