from collections import defaultdict
from typing import Dict, List

from sqlalchemy import func, select

from holiday_bench.codec import decode
from holiday_bench.exceptions import ValidationError
from holiday_bench.logging_setup import get_logger
from holiday_bench.models import Store, StoreBitflag, StoreHoliday

logger = get_logger('validation')

def find_mismatches(session) -> List[Dict]:
    """Compare the normalized and bit-mask closing days of every store.
    
    Stores are matched to their store_bitflag rows by name. Each store must
    have exactly one bitflag row holding a valid mask, and every bitflag row
    must belong to a store.
    
    Args:
        session: SQLAlchemy session
        
    Returns:
        One dictionary per store (or orphan bitflag name) whose two
        representations differ
    """
    normalized = defaultdict(set)
    rows = session.execute(
        select(Store.name, StoreHoliday.day_of_week)
        .outerjoin(StoreHoliday, Store.id == StoreHoliday.store_id)
    )
    for name, day in rows:
        days = normalized[name]
        if day is not None:
            days.add(day)
    
    bitflags = defaultdict(list)
    for name, holidays in session.execute(select(StoreBitflag.name, StoreBitflag.holidays)):
        bitflags[name].append(holidays)
    
    mismatches = []
    for name, days in normalized.items():
        masks = bitflags.get(name, [])
        if not masks:
            mismatches.append({'store': name, 'normalized': _labels(days), 'bitflag': None})
            continue
        
        if len(masks) > 1:
            mismatches.append({
                'store': name,
                'normalized': _labels(days),
                'bitflag': None,
                'bitflag_rows': len(masks)
            })
            continue
        
        mask = masks[0]
        try:
            decoded = decode(mask)
        except ValidationError:
            mismatches.append({
                'store': name,
                'normalized': _labels(days),
                'bitflag': None,
                'holidays': mask
            })
            continue
        
        if decoded != days:
            mismatches.append({
                'store': name,
                'normalized': _labels(days),
                'bitflag': _labels(decoded),
                'holidays': mask
            })
    
    # Bitflag rows with no matching store
    for name, masks in bitflags.items():
        if name not in normalized:
            mismatches.append({
                'store': name,
                'normalized': None,
                'bitflag_rows': len(masks),
                'holidays': masks[0] if len(masks) == 1 else masks
            })
    
    return mismatches

def verify_consistency(session) -> int:
    """Check that both schemas encode the same closing days for every store.
    
    Returns:
        Number of stores checked
        
    Raises:
        ValidationError: If any store's representations disagree
    """
    mismatches = find_mismatches(session)
    if mismatches:
        raise ValidationError(
            f"{len(mismatches)} stores have inconsistent closing days",
            code='INCONSISTENT_HOLIDAYS',
            details=mismatches
        )
    
    checked = session.execute(select(func.count(Store.id))).scalar_one()
    logger.info(f"Closing days consistent for {checked} stores")
    return checked

def _labels(days):
    return sorted(day.value for day in days)
