"""Errors raised by the entities manager and its collaborators."""

from enum import Enum


class ErrorKind(str, Enum):
    """Semantic error kinds callers can branch on."""

    TYPE_NOT_FOUND = "type_not_found"
    IMPLEMENTATION_NOT_FOUND = "implementation_not_found"
    ENTITY_NOT_FOUND = "entity_not_found"
    ACCOUNT_NOT_FOUND = "account_not_found"
    MEMBER_NOT_FOUND = "member_not_found"
    ENTITY_ALREADY_EXISTS = "entity_already_exists"
    ACCOUNT_ALREADY_EXISTS = "account_already_exists"
    MEMBER_ALREADY_EXISTS = "member_already_exists"
    ENTITY_CREATION = "entity_creation"
    ACCOUNT_CREATION = "account_creation"
    LOCATOR = "locator"


class EntitiesError(Exception):
    """Base class for every error of this package."""

    kind: ErrorKind
    default_message = ""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)


class TypeNotFoundError(EntitiesError):
    kind = ErrorKind.TYPE_NOT_FOUND
    default_message = "Type not found"


class ImplementationNotFoundError(EntitiesError):
    kind = ErrorKind.IMPLEMENTATION_NOT_FOUND
    default_message = "Implementation not found"


class EntityNotFoundError(EntitiesError):
    kind = ErrorKind.ENTITY_NOT_FOUND
    default_message = "Entity not found"


class AccountNotFoundError(EntitiesError):
    kind = ErrorKind.ACCOUNT_NOT_FOUND
    default_message = "EntityAccount not found"


class MemberNotFoundError(EntitiesError):
    kind = ErrorKind.MEMBER_NOT_FOUND
    default_message = "EntityMember not found"


class AlreadyExistsError(EntitiesError):
    """A duplicate was detected; ``existing_id`` names the known record."""

    label = "Record"

    def __init__(self, existing_id: str) -> None:
        self.existing_id = existing_id
        super().__init__(f"{self.label} already exists ({existing_id})")


class EntityAlreadyExistsError(AlreadyExistsError):
    kind = ErrorKind.ENTITY_ALREADY_EXISTS
    label = "Entity"


class AccountAlreadyExistsError(AlreadyExistsError):
    kind = ErrorKind.ACCOUNT_ALREADY_EXISTS
    label = "EntityAccount"


class MemberAlreadyExistsError(AlreadyExistsError):
    kind = ErrorKind.MEMBER_ALREADY_EXISTS
    label = "EntityMember"


class EntityCreationError(EntitiesError):
    kind = ErrorKind.ENTITY_CREATION
    default_message = "Unknown Entity Type"


class AccountCreationError(EntitiesError):
    kind = ErrorKind.ACCOUNT_CREATION
    default_message = "Unknown EntityAccount Type"


class LocatorError(EntitiesError):
    """A service locator could not build the requested instance."""

    kind = ErrorKind.LOCATOR
    default_message = "Could not materialize service"
