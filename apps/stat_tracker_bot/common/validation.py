"""
Input validation utilities for stat tracker commands.
"""

from typing import Optional


def validate_int_range(parameter_name: str, value: int, minimum: int, maximum: int) -> int:
    """Raise ValueError if value is outside [minimum, maximum]."""
    if value < minimum or value > maximum:
        raise ValueError(
            f"Invalid {parameter_name}: {value}. Must be between {minimum} and {maximum}."
        )
    return value


def validate_optional_limit(
    value: Optional[int],
    default: int,
    minimum: int,
    maximum: int,
) -> int:
    """Return the default when no limit was given, otherwise the validated limit."""
    if value is None:
        return default
    return validate_int_range("limit", value, minimum, maximum)


def validate_choice_parameter(
    parameter_name: str,
    value: str,
    valid_choices: set,
    display_choices: list = None
) -> str:
    """
    Validate and normalize a choice parameter.

    Args:
        parameter_name: Name of the parameter for error messages
        value: The value to validate
        valid_choices: Set of valid lowercase values
        display_choices: Optional list of display names for error messages

    Returns:
        Normalized (lowercase, stripped) value

    Raises:
        ValueError: If value is not in valid_choices
    """
    normalized_value = value.lower().strip()
    if normalized_value not in valid_choices:
        display_list = display_choices or sorted(valid_choices)
        raise ValueError(
            f"Invalid {parameter_name}: {value}. Valid options: {', '.join(display_list)}"
        )
    return normalized_value
