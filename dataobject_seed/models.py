"""Data models and type definitions."""

import json
from dataclasses import asdict, dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterator, Mapping

FIELD_KINDS = (
    "text",
    "email",
    "password",
    "integer",
    "number",
    "boolean",
    "date",
    "datetime",
    "select",
)

CARDINALITY_ONE = "one"
CARDINALITY_MANY = "many"


@dataclass(frozen=True)
class FieldSpec:
    """
    Scalar field declared by a type.

    Attributes:
        name: Field name as stored (e.g. "firstname")
        kind: One of FIELD_KINDS, used for storage type and Faker fill
    """

    name: str
    kind: str = "text"

    def __post_init__(self):
        if self.kind not in FIELD_KINDS:
            raise ValueError(
                f"Unknown field kind '{self.kind}' for field '{self.name}'. "
                f"Available: {', '.join(FIELD_KINDS)}"
            )


@dataclass(frozen=True)
class RelationSpec:
    """
    Outgoing relation from one type to another.

    Attributes:
        field: Relation field name on the source type
        target: Target type name
        cardinality: "one" (single object) or "many" (ordered list)
        max_targets: Upper bound of targets for "many" relations
    """

    field: str
    target: str
    cardinality: str = CARDINALITY_ONE
    max_targets: int = 1

    def __post_init__(self):
        if self.cardinality not in (CARDINALITY_ONE, CARDINALITY_MANY):
            raise ValueError(
                f"Relation '{self.field}' has unknown cardinality '{self.cardinality}'"
            )
        if self.max_targets < 1:
            raise ValueError(f"Relation '{self.field}' needs max_targets >= 1")

    @property
    def is_many(self) -> bool:
        return self.cardinality == CARDINALITY_MANY


@dataclass(frozen=True)
class TypeSchema:
    """
    Static capability descriptor of an entity type.

    Population and wiring consult this instead of probing objects for
    setters, so every supported field is known up front.

    Attributes:
        name: Type name (e.g. "Customer")
        fields: Declared scalar fields
        relations: Declared relation field names
        class_id: Store class identifier (defaults to the name)
    """

    name: str
    fields: tuple[FieldSpec, ...] = ()
    relations: tuple[str, ...] = ()
    class_id: str | None = None

    @property
    def store_id(self) -> str:
        """Class identifier used in store table names."""
        return self.class_id or self.name

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def has_field(self, name: str) -> bool:
        return any(f.name == name for f in self.fields)

    def has_relation(self, name: str) -> bool:
        return name in self.relations

    def get_field(self, name: str) -> FieldSpec | None:
        for spec in self.fields:
            if spec.name == name:
                return spec
        return None


@dataclass(eq=False)
class Instance:
    """
    Handle to a record in the object store.

    Attributes:
        type_name: Type of the object
        class_id: Store class identifier
        key: Human-readable key, unique under its parent
        parent_id: Id of the containing folder
        published: Whether the object is published
        id: Store-assigned id (None until first save)
        fields: Scalar field values
        relations: Relation values (one Instance or a list of Instances)
    """

    type_name: str
    class_id: str
    key: str = ""
    parent_id: int | None = None
    published: bool = False
    id: int | None = None
    fields: dict[str, Any] = field(default_factory=dict)
    relations: dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        return f"Instance({self.type_name!r}, key={self.key!r}, id={self.id!r})"


@dataclass
class Container:
    """
    Folder node in the object tree.

    Attributes:
        id: Store-assigned id
        parent_id: Id of the parent folder (0 for the root)
        key: Folder key ("" for the root)
        path: Path of the parent, with trailing slash ("/" for the root)
    """

    id: int
    parent_id: int
    key: str
    path: str = "/"

    @property
    def full_path(self) -> str:
        """Path under which children of this folder live."""
        if not self.key:
            return self.path
        return f"{self.path}{self.key}/"


class CreatedRegistry:
    """
    Objects created during one seeding run, by type and 1-based index.

    Built incrementally in the first pass and frozen before relations are
    wired, so the second pass only ever reads it.
    """

    def __init__(self):
        self._instances: dict[str, dict[int, Instance]] = {}
        self._frozen = False

    def start_type(self, type_name: str) -> None:
        """Register a type with no instances yet."""
        self._check_writable()
        self._instances.setdefault(type_name, {})

    def add(self, type_name: str, index: int, instance: Instance) -> None:
        self._check_writable()
        if index < 1:
            raise ValueError(f"Instance index must be >= 1, got {index}")
        self._instances.setdefault(type_name, {})[index] = instance

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, type_name: str, index: int) -> Instance | None:
        return self._instances.get(type_name, {}).get(index)

    def count(self, type_name: str) -> int:
        return len(self._instances.get(type_name, {}))

    def instances(self, type_name: str) -> Mapping[int, Instance]:
        """Read-only view of index -> Instance for a type."""
        return MappingProxyType(self._instances.get(type_name, {}))

    def types(self) -> list[str]:
        return list(self._instances)

    def items(self) -> Iterator[tuple[str, int, Instance]]:
        """Iterate (type_name, index, instance) in creation order."""
        for type_name, by_index in self._instances.items():
            for index, instance in by_index.items():
                yield type_name, index, instance

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._instances

    def __len__(self) -> int:
        return sum(len(by_index) for by_index in self._instances.values())

    def _check_writable(self) -> None:
        if self._frozen:
            raise RuntimeError("CreatedRegistry is read-only once relation wiring starts")


class SeedPhase(str, Enum):
    """Orchestrator state machine."""

    NOT_STARTED = "not_started"
    ENUMERATING_TYPES = "enumerating_types"
    PASS1 = "pass1"
    PASS2 = "pass2"
    DONE = "done"


FAILURE_TYPE_UNAVAILABLE = "type_unavailable"
FAILURE_CONTAINER_ALLOCATION = "container_allocation"
FAILURE_INSTANCE_PERSIST = "instance_persist"
FAILURE_RELATION_PERSIST = "relation_persist"


@dataclass
class FailureRecord:
    """
    One contained failure of a seeding run.

    Attributes:
        kind: One of the FAILURE_* constants
        type_name: Type being processed
        index: Instance index (None for type-level failures)
        message: Error message
    """

    kind: str
    type_name: str
    index: int | None
    message: str


@dataclass
class TypeReport:
    """Per-type counters of a seeding run."""

    type_name: str
    created: int = 0
    reused: int = 0
    failed: int = 0
    relation_failures: int = 0
    skipped: bool = False
    container_id: int | None = None

    @property
    def persisted(self) -> int:
        return self.created + self.reused


@dataclass
class SeedingReport:
    """
    Result of a seeding run.

    Attributes:
        types: Per-type counters, in enumeration order
        warnings: Container allocation warnings
        failures: Every contained failure
    """

    types: dict[str, TypeReport] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)
    failures: list[FailureRecord] = field(default_factory=list)

    def for_type(self, type_name: str) -> TypeReport:
        if type_name not in self.types:
            self.types[type_name] = TypeReport(type_name=type_name)
        return self.types[type_name]

    def record_failure(
        self, kind: str, type_name: str, index: int | None, message: str
    ) -> None:
        self.failures.append(FailureRecord(kind, type_name, index, message))

    @property
    def skipped_types(self) -> list[str]:
        return [name for name, report in self.types.items() if report.skipped]

    @property
    def total_created(self) -> int:
        return sum(report.created for report in self.types.values())

    @property
    def total_reused(self) -> int:
        return sum(report.reused for report in self.types.values())

    @property
    def total_failed(self) -> int:
        return sum(
            report.failed + report.relation_failures for report in self.types.values()
        )

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)

    def failures_of(self, kind: str) -> list[FailureRecord]:
        return [f for f in self.failures if f.kind == kind]

    def to_dict(self) -> dict[str, Any]:
        return {
            "types": {name: asdict(report) for name, report in self.types.items()},
            "warnings": list(self.warnings),
            "failures": [asdict(f) for f in self.failures],
            "totals": {
                "created": self.total_created,
                "reused": self.total_reused,
                "failed": self.total_failed,
            },
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)
