# ------------------------------
# Validation Framework
# ------------------------------

from abc import ABC, abstractmethod
from typing import Any, Sequence, Tuple
import argparse

from epdgeom.epd_config import parse_tile
from epdgeom.epd_errors import InvalidTileID
from epdgeom.epd_logging import resolve_level
from epdgeom.epd_tiles import Side


class ValidationRule(ABC):
    """Base class for validation rules"""

    @abstractmethod
    def validate(self, args: Any) -> Tuple[bool, str]:
        """
        Validate arguments and return (is_valid, error_message)

        Returns:
            Tuple[bool, str]: (is_valid, error_message)
        """
        pass


class IntegerRule(ValidationRule):
    """Validate that a field is an integer"""

    def __init__(self, field_name: str, min_value: int = None):
        self.field_name = field_name
        self.min_value = min_value

    def validate(self, args: Any) -> Tuple[bool, str]:
        value = getattr(args, self.field_name, None)
        if value is not None:
            if isinstance(value, bool) or not isinstance(value, int):
                return False, f"--{self.field_name} must be an integer"
            if self.min_value is not None and value < self.min_value:
                return False, f"--{self.field_name} must be >= {self.min_value}"
        return True, ""


class SideRule(ValidationRule):
    """Validate a wheel side and normalise it to a Side"""

    def __init__(self, field_name: str = "side"):
        self.field_name = field_name

    def validate(self, args: Any) -> Tuple[bool, str]:
        value = getattr(args, self.field_name, None)
        if value is None:
            return True, ""
        try:
            setattr(args, self.field_name, Side.parse(value))
        except InvalidTileID as e:
            return False, f"--{self.field_name}: {e}"
        return True, ""


class TileRule(ValidationRule):
    """Validate a tile identity and normalise it to a TileID"""

    def __init__(self, field_name: str = "tile"):
        self.field_name = field_name

    def validate(self, args: Any) -> Tuple[bool, str]:
        value = getattr(args, self.field_name, None)
        if value is None:
            return True, ""
        try:
            setattr(args, self.field_name, parse_tile(value))
        except (InvalidTileID, ValueError, TypeError) as e:
            return False, f"--{self.field_name}: {e}"
        return True, ""


class LogLevelRule(ValidationRule):
    """Validate a log level name, which may come from a config file"""

    def __init__(self, field_name: str = "log_level"):
        self.field_name = field_name

    def validate(self, args: Any) -> Tuple[bool, str]:
        value = getattr(args, self.field_name, None)
        if value is None:
            return True, ""
        try:
            resolve_level(value)
        except ValueError as e:
            return False, f"--log-level: {e}"
        return True, ""


class RequiredFieldRule(ValidationRule):
    """Validate that required fields are present"""

    def __init__(self, field_name: str):
        self.field_name = field_name

    def validate(self, args: Any) -> Tuple[bool, str]:
        value = getattr(args, self.field_name, None)
        if value is None:
            return False, f"--{self.field_name} is required"
        return True, ""


class ValidationEngine:
    """Engine for running validation rules"""

    def __init__(self):
        self.rules: list[ValidationRule] = []

    def add_rule(self, rule: ValidationRule) -> 'ValidationEngine':
        """Add a validation rule"""
        self.rules.append(rule)
        return self

    def validate(self, args: Any, parser: argparse.ArgumentParser) -> Any:
        """
        Validate arguments using all registered rules. The first failing
        rule is reported through parser.error.

        Returns:
            Validated (and normalised) arguments
        """
        for rule in self.rules:
            is_valid, error_msg = rule.validate(args)
            if not is_valid:
                parser.error(error_msg)
        return args


def create_default_validator(required: Sequence[str] = ()) -> ValidationEngine:
    """Create a validator with common validation rules"""
    validator = ValidationEngine()
    for field_name in required:
        validator.add_rule(RequiredFieldRule(field_name))
    return (validator
            .add_rule(LogLevelRule("log_level"))
            .add_rule(TileRule("tile"))
            .add_rule(SideRule("side"))
            .add_rule(IntegerRule("n", min_value=1))
            .add_rule(IntegerRule("seed", min_value=0)))


def validate_args(args: Any, parser: argparse.ArgumentParser, required: Sequence[str] = ()) -> Any:
    """
    Convenience function to validate arguments using default rules

    Args:
        args: Parsed arguments
        parser: Argument parser
        required: Fields the selected command cannot run without

    Returns:
        Validated arguments
    """
    validator = create_default_validator(required)
    return validator.validate(args, parser)
