"""Exceptions raised by the sources workflow."""


class SourcesError(Exception):
    """Base class for source workflow errors."""


class PersistenceError(SourcesError):
    """Storage rejected a create, read or update."""


class InvalidToken(SourcesError):
    """A supplied token was missing, empty or did not match."""


class InvalidArgument(SourcesError, ValueError):
    """A caller passed an argument this component does not understand."""


class InvalidTokenKind(InvalidArgument):
    """Token kind is not one of confirm, edit, admin."""

    def __init__(self, kind: object) -> None:
        super().__init__(f"Invalid token kind: {kind!r}")
        self.kind = kind


class UnknownAction(InvalidArgument):
    """Moderation action is not one of publish, trash."""

    def __init__(self, action: object) -> None:
        super().__init__(f"Unknown moderation action: {action!r}")
        self.action = action


class InvalidTransition(InvalidArgument):
    """Status change not permitted by the lifecycle."""

    def __init__(self, source_id: int, from_status: str, to_status: str) -> None:
        super().__init__(
            f"Source {source_id} cannot move from {from_status!r} to {to_status!r}"
        )
        self.source_id = source_id
        self.from_status = from_status
        self.to_status = to_status
