"""Domain models for draft workspaces and their template documents."""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from .exceptions import InvalidTemplateDocumentError, SectionNotFoundError


@dataclass(slots=True)
class SectionEntry:
    type: str
    settings: dict[str, Any] = field(default_factory=dict)
    blocks: Optional[list[Any]] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type, "settings": copy.deepcopy(self.settings)}
        if self.blocks is not None:
            data["blocks"] = copy.deepcopy(self.blocks)
        return data


@dataclass(slots=True)
class TemplateDocument:
    """Ordered sections plus per-section settings for one page type.

    Parsing and serialization always deep-copy, so two documents never share
    mutable structure.
    """

    order: list[str] = field(default_factory=list)
    sections: dict[str, SectionEntry] = field(default_factory=dict)
    layout: Optional[str] = None
    settings: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, text: str) -> "TemplateDocument":
        try:
            data = json.loads(text) if text.strip() else {}
        except json.JSONDecodeError as exc:
            raise InvalidTemplateDocumentError(f"Template document is not valid JSON: {exc}") from exc
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Any) -> "TemplateDocument":
        if not isinstance(data, dict):
            raise InvalidTemplateDocumentError("Template document must be a JSON object")
        raw_sections = data.get("sections") or {}
        if not isinstance(raw_sections, dict):
            raise InvalidTemplateDocumentError("'sections' must be an object")
        sections: dict[str, SectionEntry] = {}
        for section_id, raw in raw_sections.items():
            if not isinstance(raw, dict) or not isinstance(raw.get("type"), str) or not raw["type"]:
                raise InvalidTemplateDocumentError(f"Section {section_id!r} needs a string 'type'")
            settings = raw.get("settings") or {}
            if not isinstance(settings, dict):
                raise InvalidTemplateDocumentError(f"Section {section_id!r} settings must be an object")
            blocks = raw.get("blocks")
            if blocks is not None and not isinstance(blocks, list):
                raise InvalidTemplateDocumentError(f"Section {section_id!r} blocks must be a list")
            sections[str(section_id)] = SectionEntry(
                type=raw["type"],
                settings=copy.deepcopy(settings),
                blocks=copy.deepcopy(blocks),
            )
        raw_order = data.get("order")
        if raw_order is None:
            order = list(sections)
        elif isinstance(raw_order, list) and all(isinstance(item, str) for item in raw_order):
            order = list(raw_order)
        else:
            raise InvalidTemplateDocumentError("'order' must be a list of section ids")
        layout = data.get("layout")
        if layout is not None and not isinstance(layout, str):
            raise InvalidTemplateDocumentError("'layout' must be a string")
        template_settings = data.get("settings") or {}
        if not isinstance(template_settings, dict):
            raise InvalidTemplateDocumentError("'settings' must be an object")
        return cls(
            order=order,
            sections=sections,
            layout=layout,
            settings=copy.deepcopy(template_settings),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "order": list(self.order),
            "sections": {section_id: entry.to_dict() for section_id, entry in self.sections.items()},
        }
        if self.layout is not None:
            data["layout"] = self.layout
        if self.settings:
            data["settings"] = copy.deepcopy(self.settings)
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, sort_keys=True, indent=2) + "\n"

    def copy(self) -> "TemplateDocument":
        return TemplateDocument.from_dict(self.to_dict())

    def warnings(self) -> list[str]:
        """Non-blocking problems an authoring tool should surface."""
        messages: list[str] = []
        seen: set[str] = set()
        for section_id in self.order:
            if section_id in seen:
                messages.append(f"Section {section_id!r} appears more than once in order")
            seen.add(section_id)
            if section_id not in self.sections:
                messages.append(f"Order references unknown section {section_id!r}")
        for section_id in self.sections:
            if section_id not in seen:
                messages.append(f"Section {section_id!r} is not placed in order and will not render")
        return messages

    def section(self, section_id: str) -> SectionEntry:
        try:
            return self.sections[section_id]
        except KeyError:
            raise SectionNotFoundError(f"Section {section_id!r} does not exist") from None

    def add_section(
        self,
        section_type: str,
        settings: Optional[dict[str, Any]] = None,
        *,
        section_id: Optional[str] = None,
        position: Optional[int] = None,
        blocks: Optional[list[Any]] = None,
    ) -> str:
        if not section_type:
            raise InvalidTemplateDocumentError("Section type is required")
        if section_id is None:
            section_id = self._next_section_id(section_type)
        elif section_id in self.sections:
            raise InvalidTemplateDocumentError(f"Section {section_id!r} already exists")
        self.sections[section_id] = SectionEntry(
            type=section_type,
            settings=copy.deepcopy(settings or {}),
            blocks=copy.deepcopy(blocks),
        )
        if position is None:
            self.order.append(section_id)
        else:
            self.order.insert(max(position, 0), section_id)
        return section_id

    def remove_section(self, section_id: str) -> SectionEntry:
        entry = self.section(section_id)
        del self.sections[section_id]
        self.order = [item for item in self.order if item != section_id]
        return entry

    def reorder(self, section_ids: list[str]) -> None:
        unknown = [item for item in section_ids if item not in self.sections]
        if unknown:
            raise SectionNotFoundError(f"Cannot order unknown sections: {', '.join(unknown)}")
        if len(set(section_ids)) != len(section_ids):
            raise InvalidTemplateDocumentError("Section order contains duplicates")
        self.order = list(section_ids)

    def update_settings(self, section_id: str, settings: dict[str, Any], *, replace: bool = False) -> SectionEntry:
        entry = self.section(section_id)
        if replace:
            entry.settings = copy.deepcopy(settings)
        else:
            entry.settings.update(copy.deepcopy(settings))
        return entry

    def set_blocks(self, section_id: str, blocks: Optional[list[Any]]) -> SectionEntry:
        entry = self.section(section_id)
        if blocks is not None and not isinstance(blocks, list):
            raise InvalidTemplateDocumentError(f"Section {section_id!r} blocks must be a list")
        entry.blocks = copy.deepcopy(blocks)
        return entry

    def _next_section_id(self, section_type: str) -> str:
        if section_type not in self.sections:
            return section_type
        suffix = 2
        while f"{section_type}_{suffix}" in self.sections:
            suffix += 1
        return f"{section_type}_{suffix}"


@dataclass(slots=True)
class DraftWorkspace:
    theme_id: str
    owner: Optional[str]
    base_snapshot_number: Optional[int]
    updated_at: Optional[datetime]


@dataclass(slots=True)
class DocumentSaveResult:
    template_name: str
    document: TemplateDocument
    version_number: int
    checksum: str
    warnings: list[str]
