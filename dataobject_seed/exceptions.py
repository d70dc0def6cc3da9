"""Custom exceptions with helpful error messages."""


class DataObjectSeedError(Exception):
    """Base exception for dataobject-seed errors."""

    pass


class TypeUnavailableError(DataObjectSeedError):
    """Type is listed by the registry but has no runtime definition."""

    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(
            f"Type '{type_name}' is listed by the type registry "
            f"but has no runtime definition.\n\n"
            f"Suggestions:\n"
            f"1. Check that the class definition for '{type_name}' was installed\n"
            f"2. Run 'dataobject-seed install' to create the store tables\n"
            f"3. Use 'dataobject-seed types' to see available types"
        )


class ContainerAllocationError(DataObjectSeedError):
    """Could not find or create the folder for a type."""

    def __init__(self, key: str, parent_id: int, reason: str):
        self.key = key
        self.parent_id = parent_id
        super().__init__(
            f"Could not find or create folder '{key}' under #{parent_id}: {reason}"
        )


class InstancePersistError(DataObjectSeedError):
    """Saving an instance failed."""

    def __init__(self, key: str, reason: str):
        self.key = key
        super().__init__(f"Could not save object '{key}': {reason}")


class RelationPersistError(DataObjectSeedError):
    """Saving relations of an instance failed."""

    def __init__(self, key: str, reason: str):
        self.key = key
        super().__init__(f"Could not save relations of object '{key}': {reason}")


class UnknownFieldError(DataObjectSeedError):
    """Field or relation is not declared by the type."""

    def __init__(self, field: str, type_name: str):
        self.field = field
        self.type_name = type_name
        super().__init__(
            f"Type '{type_name}' does not declare field '{field}'.\n\n"
            f"Suggestions:\n"
            f"1. Check the field name spelling\n"
            f"2. Add '{field}' to the class definition of '{type_name}'\n"
            f"3. Guard the assignment with schema.has_field('{field}')"
        )


class SchemaResetError(DataObjectSeedError):
    """A reset statement failed; earlier statements stay applied."""

    def __init__(self, step: str, reason: str):
        self.step = step
        super().__init__(
            f"Reset failed at step '{step}': {reason}\n\n"
            f"The store is left partially cleared. Fix the cause and run "
            f"'dataobject-seed reset' again."
        )
