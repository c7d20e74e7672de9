import pytest
from prompt_toolkit.document import Document
from prompt_toolkit.validation import ValidationError

from tasklane.parser.option_types import OptionType
from tasklane.validators import type_validator


def test_type_validator_uses_type_rules():
    validator = type_validator(OptionType.NUMBER)
    validator.validate(Document("3.5"))
    with pytest.raises(ValidationError, match="Enter a valid number"):
        validator.validate(Document("three"))


def test_type_validator_checks_choices():
    validator = type_validator(OptionType.NUMBER, choices=[1, 2])
    validator.validate(Document("2"))
    with pytest.raises(ValidationError, match=r"Choices: \{1, 2\}"):
        validator.validate(Document("3"))
