"""
Reference resolution for program definitions.

Every weight-producing slot reads a reference key: a config field
(starting weight, training max, 1RM) or, for start_weight_key only, another
stage slot whose seed it derives from. This module checks those chains once,
at load time, and reports dangling or cyclic references per slot so that a
broken slot never blocks the rest of the schedule.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Set, Union

from models.program_definition import ProgramDefinition, Slot, SlotMode
from services.progression_rules import round_to_increment

logger = logging.getLogger(__name__)

ConfigValues = Mapping[str, Union[float, str]]


class _UnresolvedReference(Exception):
    """Internal signal for a reference that cannot be followed."""


@dataclass
class ReferenceReport:
    """Per-slot reference errors found in a definition (and optionally a config)."""

    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        """True when every slot resolves."""
        return not self.errors

    def error_for(self, slot_id: str) -> Optional[str]:
        """Error message for a slot, None when it resolves."""
        return self.errors.get(slot_id)


def config_number(config: Optional[ConfigValues], key: str) -> Optional[float]:
    """Numeric config value for key, None when missing or not a finite number."""
    if config is None or key not in config:
        return None
    value = config[key]
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _seed_chain(slot: Slot, slots: Mapping[str, Slot], weight_keys: Set[str]) -> List[str]:
    """
    Follow a slot's seed key to the config field it ultimately reads.

    Returns:
        Slot ids visited, ending with the terminal config key

    Raises:
        _UnresolvedReference: dangling key or cycle
    """
    chain = [slot.id]
    key = slot.seed_key
    while key not in weight_keys:
        target = slots.get(key)
        if target is None or target.mode is not SlotMode.STAGE_LADDER:
            raise _UnresolvedReference(f"'{key}' is not a weight config field or stage slot")
        if target.id in chain:
            raise _UnresolvedReference(
                f"cyclic reference: {' -> '.join(chain + [target.id])}"
            )
        chain.append(target.id)
        key = target.seed_key
    chain.append(key)
    return chain


def _require_key(key: str, weight_keys: Set[str], config: Optional[ConfigValues], role: str) -> None:
    if key not in weight_keys:
        raise _UnresolvedReference(f"{role} '{key}' is not a weight config field")
    if config is not None and config_number(config, key) is None:
        raise _UnresolvedReference(f"{role} '{key}' has no value in config")


def _check_slot(
    slot: Slot,
    slots: Mapping[str, Slot],
    weight_keys: Set[str],
    config: Optional[ConfigValues],
) -> None:
    if slot.mode is SlotMode.GPP:
        return
    if slot.mode is SlotMode.PRESCRIPTION_LADDER:
        _require_key(slot.percent_of, weight_keys, config, "percent_of")
        return

    if slot.training_max_key is not None:
        _require_key(slot.training_max_key, weight_keys, config, "training_max_key")
    chain = _seed_chain(slot, slots, weight_keys)
    _require_key(chain[-1], weight_keys, config, "start_weight_key")


def resolve_references(
    definition: ProgramDefinition,
    config: Optional[ConfigValues] = None,
) -> ReferenceReport:
    """
    Check every slot's reference keys.

    Args:
        definition: Program definition to analyze
        config: Optional config; when given, referenced keys must hold numbers

    Returns:
        ReferenceReport with one message per unresolved slot id
    """
    weight_keys = set(definition.field_keys("weight"))
    slots = definition.slots_by_id()
    errors: Dict[str, str] = {}

    for day in definition.days:
        for slot in day.slots:
            if slot.id in errors:
                continue
            try:
                _check_slot(slot, slots, weight_keys, config)
            except _UnresolvedReference as e:
                errors[slot.id] = str(e)

    if errors:
        logger.debug(
            "Definition %s v%s has %d unresolved slot(s)",
            definition.id,
            definition.version,
            len(errors),
        )
    return ReferenceReport(errors=errors)


def seed_weight(definition: ProgramDefinition, slot: Slot, config: ConfigValues) -> float:
    """
    Starting tracked weight of a stage-ladder slot.

    Follows start_weight_key chains, then applies the slot's multiplier and
    offset (offset counts exercise weight increments). Only call for slots
    the ReferenceReport marks as resolved.

    Args:
        definition: Program definition
        slot: Stage-ladder slot
        config: Validated config

    Returns:
        Rounded seed weight
    """
    weight_keys = set(definition.field_keys("weight"))
    key = slot.seed_key
    if key in weight_keys:
        base = config_number(config, key) or 0.0
    else:
        base = seed_weight(definition, definition.slots_by_id()[key], config)

    rounding = definition.rounding_for(slot)
    if slot.start_weight_multiplier is not None:
        base = round_to_increment(base * slot.start_weight_multiplier, rounding)
    offset = slot.start_weight_offset * definition.weight_increment_for(slot.exercise_id)
    return round_to_increment(base - offset, rounding)
