"""
Config validator for program inputs.

Validates raw user input (form strings or JSON numbers) against a
definition's declared config fields and coerces it into a typed config.
Validation is atomic: either every field is accepted and a config is
returned, or none of it is and the result carries a per-field error map.

Weight values are stored unrounded; rounding is applied per use because
slots reading the same key may round to different increments.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from core.constants import MAX_CONFIG_WEIGHT
from models.program_definition import ConfigField, SelectConfigField, WeightConfigField

logger = logging.getLogger(__name__)

Config = Dict[str, Union[float, str]]


@dataclass
class ConfigValidationResult:
    """Result of config validation."""

    is_valid: bool
    config: Optional[Config] = None
    errors: Dict[str, str] = field(default_factory=dict)


class ConfigValidator:
    """
    Validates raw config values against declared fields.

    Checks:
    1. Weight fields - present, numeric, finite, >= min, <= hard ceiling
    2. Select fields - present and one of the declared option values
    """

    def __init__(self, max_weight: float = MAX_CONFIG_WEIGHT):
        """
        Initialize the validator.

        Args:
            max_weight: Hard ceiling for any weight value
        """
        self._max_weight = max_weight

    def validate(
        self,
        fields: Sequence[ConfigField],
        raw: Mapping[str, Any],
    ) -> ConfigValidationResult:
        """
        Validate and coerce a raw config.

        Args:
            fields: Declared config fields of the program definition
            raw: Raw values keyed by field key

        Returns:
            ConfigValidationResult with the config or per-field errors
        """
        config: Config = {}
        errors: Dict[str, str] = {}

        for config_field in fields:
            value = raw.get(config_field.key)
            if isinstance(config_field, WeightConfigField):
                parsed, error = self._validate_weight_field(config_field, value)
            else:
                parsed, error = self._validate_select_field(config_field, value)

            if error is not None:
                errors[config_field.key] = error
            else:
                config[config_field.key] = parsed

        ignored = sorted(set(raw) - {f.key for f in fields})
        if ignored:
            logger.debug("Ignoring undeclared config keys: %s", ", ".join(ignored))

        if errors:
            logger.info("Config rejected: %d invalid field(s)", len(errors))
            return ConfigValidationResult(is_valid=False, errors=errors)
        return ConfigValidationResult(is_valid=True, config=config)

    def _validate_weight_field(self, config_field: WeightConfigField, value: Any):
        """
        Parse a weight value.

        Returns:
            (parsed float, None) or (None, error message)
        """
        if value is None or (isinstance(value, str) and not value.strip()):
            return None, "Required"
        if isinstance(value, bool):
            return None, "Must be a number"

        try:
            number = float(value.strip() if isinstance(value, str) else value)
        except (TypeError, ValueError):
            return None, "Must be a number"

        if not math.isfinite(number):
            return None, "Must be a number"
        if number < config_field.min:
            return None, f"Minimum {config_field.min:g}"
        if number > self._max_weight:
            return None, f"Maximum {self._max_weight:g}"
        return number, None

    def _validate_select_field(self, config_field: SelectConfigField, value: Any):
        """
        Check a choice value against the declared options.

        Returns:
            (value, None) or (None, error message)
        """
        if value is None or (isinstance(value, str) and not value.strip()):
            return None, "Required"

        allowed = [option.value for option in config_field.options]
        choice = str(value)
        if choice not in allowed:
            return None, f"Must be one of: {', '.join(allowed)}"
        return choice, None


def validate_config(
    fields: Sequence[ConfigField],
    raw: Mapping[str, Any],
) -> ConfigValidationResult:
    """Validate raw input with the default validator. See ConfigValidator.validate."""
    return ConfigValidator().validate(fields, raw)
