# Tasklane CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Input validators for interactive Tasklane prompts.

Each validator is a Prompt Toolkit `Validator` built from the type registry,
so a value typed at a prompt is checked by exactly the rules that apply to
the same value on the command line.

Included Validators:
- type_validator: Accepts input that is valid for an option type and its choices.
- number_range_validator: Enforces numeric input within a range.
- choice_validator: Accepts one of a fixed set of words (case-insensitive).
- yes_no_validator: Accepts the boolean words understood by the parser.
- array_validator: Validates a `, ` separated list of values.
"""
from typing import Any, Sequence

from prompt_toolkit.document import Document
from prompt_toolkit.validation import ValidationError, Validator

from tasklane.parser.option_types import FALSY, TRUTHY, TypeSpec, stringify, typer_for


def type_validator(type_: TypeSpec, choices: Sequence[Any] = ()) -> Validator:
    """Validator for a value of the given option type."""
    typer = typer_for(type_)
    choice_text = [stringify(choice) for choice in choices]

    def validate(text: str) -> bool:
        if not typer.validate(text):
            return False
        if choice_text and text not in choice_text:
            return False
        return True

    if choice_text:
        error_message = f"Invalid input. Choices: {{{', '.join(choice_text)}}}."
    else:
        error_message = f"Invalid input. Enter a valid {typer.name}."
    return Validator.from_callable(validate, error_message=error_message)


def number_range_validator(
    minimum: float | None = None, maximum: float | None = None
) -> Validator:
    """Validator for numbers, optionally bounded on either side."""

    def validate(text: str) -> bool:
        try:
            value = float(text)
        except ValueError:
            return False
        if minimum is not None and value < minimum:
            return False
        if maximum is not None and value > maximum:
            return False
        return True

    if minimum is not None and maximum is not None:
        error_message = f"Invalid input. Enter a number between {minimum} and {maximum}."
    elif minimum is not None:
        error_message = f"Invalid input. Enter a number of at least {minimum}."
    elif maximum is not None:
        error_message = f"Invalid input. Enter a number of at most {maximum}."
    else:
        error_message = "Invalid input. Enter a number."
    return Validator.from_callable(validate, error_message=error_message)


def choice_validator(
    choices: Sequence[str], error_message: str | None = None
) -> Validator:
    """Validator for specific word inputs."""

    def validate(text: str) -> bool:
        return text.upper() in [choice.upper() for choice in choices]

    if error_message is None:
        error_message = f"Invalid input. Choices: {{{', '.join(choices)}}}."

    return Validator.from_callable(validate, error_message=error_message)


def yes_no_validator() -> Validator:
    """Validator for yes/no inputs."""

    def validate(text: str) -> bool:
        return text.strip().lower() in TRUTHY | FALSY | {"y", "n"}

    return Validator.from_callable(validate, error_message="Enter 'Y', 'y' or 'N', 'n'.")


class ArrayValidator(Validator):
    """Validates a list of values separated by `separator`."""

    def __init__(
        self,
        type_: TypeSpec,
        minimum: int = 0,
        maximum: float = float("inf"),
        separator: str = ", ",
    ) -> None:
        self.typer = typer_for(type_)
        self.minimum = minimum
        self.maximum = maximum
        self.separator = separator
        super().__init__()

    def validate(self, document: Document) -> None:
        text = document.text.strip()
        values = [value.strip() for value in text.split(self.separator)] if text else []
        if len(values) < self.minimum:
            raise ValidationError(message=f"Enter at least {self.minimum} value(s).")
        if len(values) > self.maximum:
            raise ValidationError(message=f"Enter at most {int(self.maximum)} value(s).")
        for value in values:
            if not self.typer.validate(value):
                raise ValidationError(
                    message=f"Invalid {self.typer.name}: {value}"
                )


def array_validator(
    type_: TypeSpec, minimum: int = 0, maximum: float = float("inf")
) -> Validator:
    return ArrayValidator(type_, minimum, maximum)
