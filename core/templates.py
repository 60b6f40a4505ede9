# core/templates.py

import re
import unicodedata
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Optional

import yaml

from core.errors import TemplateError, ValidationError

FIELD_KINDS = {"text", "textarea", "dropdown", "coordinates", "time"}

_PUNCTUATION = re.compile(r"[.,;:!?¡¿\"'()\[\]{}\-_+=*&%$#@|\\/<>~`^]")
_WHITESPACE  = re.compile(r"\s+")


@dataclass
class TemplateField:
    key:      str
    label:    str
    kind:     str       = "text"
    required: bool      = False
    default:  str       = ""
    options:  List[str] = field(default_factory=list)

    def value_from(self, form: Mapping[str, str]) -> str:
        value = form.get(self.key)
        return self.default if value is None else str(value)


@dataclass
class ScriptTemplate:
    """
    One form a script is produced from. `name` is what gets stored as the
    script's template_type.
    """
    name:          str
    display_name:  str
    fields:        List[TemplateField]
    client_field:  Optional[str] = None
    client_prefix: Optional[str] = None

    def problems(self, form: Mapping[str, str]) -> List[str]:
        """Human-readable reasons `form` cannot be saved; empty when it can."""
        problems = []
        for f in self.fields:
            value = f.value_from(form).strip()
            if f.required and not value:
                problems.append(f"{f.label} is required")
            elif value and f.kind == "dropdown" and f.options and value not in f.options:
                problems.append(f"{f.label}: {value!r} is not one of the options")
        return problems

    def validate(self, form: Mapping[str, str]) -> None:
        problems = self.problems(form)
        if problems:
            raise ValidationError("; ".join(problems))

    def render(self, form: Mapping[str, str]) -> str:
        """The script text: one `Label: value` line per field, in field order."""
        return "\n".join(f"{f.label}: {f.value_from(form)}" for f in self.fields)

    def client_name(self, form: Mapping[str, str], sequence: int) -> str:
        """The client field when filled in, else '<prefix> 001', '<prefix> 002', ..."""
        if self.client_field:
            value = str(form.get(self.client_field) or "").strip()
            if value:
                return value
        return f"{self.client_prefix or self.display_name} {sequence:03d}"


def normalize(text: str) -> str:
    """
    Single-line, lowercase, accent- and punctuation-free copy of `text`,
    for pasting into systems that reject anything else.
    """
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFKD", text.replace("\r", " ").replace("\n", " "))
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c)).lower()
    stripped = _PUNCTUATION.sub("", stripped)
    return _WHITESPACE.sub(" ", stripped).strip()


class TemplateCatalog:
    """Templates loaded from templates.yaml, by name."""

    def __init__(self, templates: List[ScriptTemplate]):
        self._templates: Dict[str, ScriptTemplate] = {}
        for template in templates:
            if template.name in self._templates:
                raise TemplateError(f"Duplicate template name: {template.name}")
            self._templates[template.name] = template

    @classmethod
    def load(cls, path: Path) -> "TemplateCatalog":
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        return cls([_parse_template(entry) for entry in raw.get("templates", [])])

    def get(self, name: str) -> ScriptTemplate:
        try:
            return self._templates[name]
        except KeyError:
            raise TemplateError(f"Unknown template: {name!r}") from None

    def names(self) -> List[str]:
        return list(self._templates)

    def __contains__(self, name: object) -> bool:
        return name in self._templates

    def __iter__(self) -> Iterator[ScriptTemplate]:
        return iter(self._templates.values())

    def __len__(self) -> int:
        return len(self._templates)


def _parse_template(entry: dict) -> ScriptTemplate:
    try:
        name = entry["name"]
        fields = [_parse_field(name, f) for f in entry.get("fields", [])]
    except (KeyError, TypeError) as exc:
        raise TemplateError(f"Malformed template entry {entry!r}: {exc}") from exc

    return ScriptTemplate(
        name=name,
        display_name=entry.get("display_name", name),
        fields=fields,
        client_field=entry.get("client_field"),
        client_prefix=entry.get("client_prefix"),
    )


def _parse_field(template_name: str, entry: dict) -> TemplateField:
    kind = entry.get("kind", "text")
    if kind not in FIELD_KINDS:
        raise TemplateError(f"{template_name}.{entry.get('key')}: unknown field kind {kind!r}")
    return TemplateField(
        key=entry["key"],
        label=entry["label"],
        kind=kind,
        required=bool(entry.get("required", False)),
        default=str(entry.get("default", "")),
        options=[str(o) for o in entry.get("options", [])],
    )
