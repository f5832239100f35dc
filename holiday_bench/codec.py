"""
Bit-mask encoding of weekly closing days.

Bit i of a mask is set when the i-th weekday of a Sunday-first week is a
closing day: Sunday=1, Monday=2, Tuesday=4, Wednesday=8, Thursday=16,
Friday=32, Saturday=64.
"""
from typing import FrozenSet, Iterable, Union

from holiday_bench.exceptions import ValidationError
from holiday_bench.models import DayOfWeek, WEEKDAYS

DayLike = Union[DayOfWeek, str]

DAY_BITS = {day: 1 << index for index, day in enumerate(WEEKDAYS)}

ALL_DAYS_MASK = (1 << len(WEEKDAYS)) - 1


def parse_day(day: DayLike) -> DayOfWeek:
    """Convert a weekday label (any case) or enum member to a DayOfWeek.
    
    Raises:
        ValidationError: If the label is not one of the seven weekdays
    """
    if isinstance(day, DayOfWeek):
        return day
    try:
        return DayOfWeek.from_string(day)
    except ValueError as e:
        raise ValidationError(str(e), code='UNKNOWN_WEEKDAY', details={'day': day})


def day_bit(day: DayLike) -> int:
    """Return the bit value of a single weekday."""
    return DAY_BITS[parse_day(day)]


def encode(days: Iterable[DayLike]) -> int:
    """Encode a collection of weekdays as a bit-mask.
    
    The result depends only on which days are present, not on their order
    or on duplicates. An empty collection encodes to 0.
    
    Args:
        days: Weekdays as DayOfWeek members or labels
        
    Returns:
        Integer mask in the range 0..127
        
    Raises:
        ValidationError: If any label is not a weekday
    """
    mask = 0
    for day in days:
        mask |= day_bit(day)
    return mask


def decode(mask: int) -> FrozenSet[DayOfWeek]:
    """Decode a bit-mask back into the set of weekdays it represents.
    
    Raises:
        ValidationError: If the mask has bits outside the seven weekdays
    """
    if isinstance(mask, bool) or not isinstance(mask, int) or mask < 0 or mask > ALL_DAYS_MASK:
        raise ValidationError(
            f"Invalid holiday mask: {mask!r}. Expected an integer between 0 and {ALL_DAYS_MASK}",
            code='INVALID_MASK'
        )
    return frozenset(day for day, bit in DAY_BITS.items() if mask & bit)
