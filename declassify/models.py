"""Core data models shared across declassify components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Set, Union


class DeclassifyError(RuntimeError):
    """Base class for failures raised while transforming a component."""


class MalformedComponentError(DeclassifyError):
    """Raised when decorator arguments fall outside the supported grammar."""

    def __init__(self, diagnostic: "Diagnostic") -> None:
        super().__init__(diagnostic.message)
        self.diagnostic = diagnostic


class SynthesisError(DeclassifyError):
    """Raised when the synthesized replacement does not parse cleanly."""


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class Diagnostic:
    """A finding reported while transforming a file."""

    code: str
    message: str
    severity: Severity = Severity.WARNING
    line: Optional[int] = None

    def __str__(self) -> str:
        location = f"line {self.line}: " if self.line is not None else ""
        return f"{location}{self.message} [{self.code}]"


class ExportKind(str, Enum):
    DEFAULT = "default"
    NAMED = "named"
    NONE = "none"


@dataclass
class ConfigEntry:
    """A single object-literal member, kept as source text."""

    key: Optional[str]
    text: str
    value: Optional[str] = None
    comments: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class DeclaredType:
    """Type annotation text plus the syntax kind it was parsed as."""

    text: str
    kind: str


@dataclass
class InputField:
    """A `@Prop` field; becomes an entry under `props`."""

    name: str
    declared_type: Optional[DeclaredType] = None
    docs: Optional[str] = None
    default: Optional[ConfigEntry] = None
    required: Optional[ConfigEntry] = None
    type_option: Optional[str] = None
    extra_options: List[ConfigEntry] = field(default_factory=list)
    optional_marker: bool = False
    comments: List[str] = field(default_factory=list)
    trailing_comments: List[str] = field(default_factory=list)


@dataclass
class StateField:
    """An initialised class field; becomes an entry returned from `data()`."""

    name: str
    initializer: str
    initializer_kind: str
    declared_type: Optional[DeclaredType] = None
    docs: Optional[str] = None
    comments: List[str] = field(default_factory=list)
    trailing_comments: List[str] = field(default_factory=list)


@dataclass
class MethodMember:
    """A class method rendered as an object-literal method."""

    name: str
    text: str
    docs: Optional[str] = None
    comments: List[str] = field(default_factory=list)
    trailing_comments: List[str] = field(default_factory=list)


@dataclass
class AccessorMember:
    """A getter and/or setter pair; becomes an entry under `computed`."""

    name: str
    getter: Optional[str] = None
    setter: Optional[str] = None
    docs: Optional[str] = None
    comments: List[str] = field(default_factory=list)
    trailing_comments: List[str] = field(default_factory=list)


# Class members that end up as entries of the generated object.
Member = Union[InputField, StateField, MethodMember, AccessorMember]

@dataclass
class ComponentIR:
    """Everything extracted from one decorated class declaration."""

    name: str
    start_byte: int
    end_byte: int
    export_kind: ExportKind
    docs: Optional[str] = None
    decorator_config: Optional[List[ConfigEntry]] = None
    inputs: List[InputField] = field(default_factory=list)
    state: List[StateField] = field(default_factory=list)
    accessors: List[AccessorMember] = field(default_factory=list)
    hooks: List[MethodMember] = field(default_factory=list)
    methods: List[MethodMember] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)


class PrimitiveKind(str, Enum):
    STRING = "String"
    NUMBER = "Number"
    BOOLEAN = "Boolean"


@dataclass(frozen=True)
class PrimitiveTag:
    kind: PrimitiveKind


@dataclass(frozen=True)
class CastTag:
    """`<wrapper> as PropType<type_text>` for non-primitive declared types."""

    wrapper: str
    type_text: str


TypeTag = Union[PrimitiveTag, CastTag]


@dataclass
class ImportEdit:
    """Bindings requested from one module."""

    module: str
    default: Optional[str] = None
    named: Set[str] = field(default_factory=set)


@dataclass
class TransformResult:
    """Outcome of running the pipeline over one source file."""

    changed: bool
    component: Optional[str] = None
    diagnostics: List[Diagnostic] = field(default_factory=list)
