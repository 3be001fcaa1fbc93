class IgnisError(Exception):
    """Base class for every error raised by ignis."""


class ValidationError(IgnisError):
    """
    Raised when a candidate response does not match the ResponseMessage
    schema. All problems found during one check are reported together,
    the caller fixes the input and tries again.
    """
    def __init__(self, problems: list[str]) -> None:
        self.problems = list(problems)
        super().__init__(
            "Invalid ResponseMessage: " + "; ".join(self.problems)
        )


class SchemaLookupError(IgnisError):
    """
    An unknown message type was requested from the schema registry.

    This is a build-time mismatch between the code and the registered
    schema. It must not be caught and recovered from.
    """
    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(f"Unknown schema entry: {type_name!r}")
