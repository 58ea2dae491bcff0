from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class MessageOut(BaseModel):
    type: Literal["status", "warning", "error"] = "status"
    text: str


class RenderElement(BaseModel):
    type: Literal["markup", "item_list"]
    markup: str | None = None
    title: str | None = None
    items: list[str] = Field(default_factory=list)


class RenderOut(BaseModel):
    """Renderable page content: status messages plus page elements."""

    messages: list[MessageOut] = Field(default_factory=list)
    build: list[RenderElement] = Field(default_factory=list)

    def message(self, text: str, type: str = "status") -> "RenderOut":
        self.messages.append(MessageOut(type=type, text=text))
        return self

    def markup(self, markup: str) -> "RenderOut":
        self.build.append(RenderElement(type="markup", markup=markup))
        return self

    def item_list(self, title: str, items: list[str]) -> "RenderOut":
        self.build.append(RenderElement(type="item_list", title=title, items=list(items)))
        return self
