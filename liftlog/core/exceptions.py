"""Domain errors raised by services and mapped to HTTP responses by the API layer."""


class UnknownExerciseTypeError(ValueError):
    """An exercise type tag outside the supported set (a configuration error)."""

    def __init__(self, tag: object):
        self.tag = tag
        super().__init__(f"Unknown exercise type: {tag!r}")


class SetValidationError(ValueError):
    """Set values that do not satisfy the exercise type's field requirements."""

    def __init__(self, exercise_type: str, errors: list[str]):
        self.exercise_type = exercise_type
        self.errors = errors
        super().__init__(f"Invalid set for {exercise_type}: {'; '.join(errors)}")
