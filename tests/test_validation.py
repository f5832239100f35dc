"""
Unit tests for the normalized/bit-mask consistency check.
"""
import random
import unittest

from sqlalchemy import update

from holiday_bench.db import session_scope
from holiday_bench.exceptions import ValidationError
from holiday_bench.generator import generate_stores
from holiday_bench.models import DayOfWeek, Store, StoreBitflag, StoreHoliday
from holiday_bench.validation import find_mismatches, verify_consistency

from tests.base import SQLiteTestCase

class TestConsistency(SQLiteTestCase):
    """Test cases for find_mismatches and verify_consistency."""
    
    def setUp(self):
        super().setUp()
        with session_scope() as session:
            generate_stores(session, 30, random.Random(4))
    
    def test_generated_data_is_consistent(self):
        with session_scope() as session:
            self.assertEqual(find_mismatches(session), [])
            self.assertEqual(verify_consistency(session), 30)
    
    def test_corrupted_mask_detected(self):
        """Changing a mask makes that store inconsistent."""
        with session_scope() as session:
            session.execute(
                update(StoreBitflag)
                .where(StoreBitflag.name == 'Store 7')
                .values(holidays=0)
            )
        
        with session_scope() as session:
            mismatches = find_mismatches(session)
            self.assertEqual([m['store'] for m in mismatches], ['Store 7'])
            
            with self.assertRaises(ValidationError) as ctx:
                verify_consistency(session)
        
        self.assertEqual(ctx.exception.code, 'INCONSISTENT_HOLIDAYS')
        self.assertEqual(len(ctx.exception.details), 1)
    
    def test_missing_bitflag_row_detected(self):
        with session_scope() as session:
            session.execute(StoreBitflag.__table__.delete().where(StoreBitflag.name == 'Store 1'))
        
        with session_scope() as session:
            mismatches = find_mismatches(session)
        
        self.assertEqual(len(mismatches), 1)
        self.assertEqual(mismatches[0]['store'], 'Store 1')
        self.assertIsNone(mismatches[0]['bitflag'])
    
    def test_store_without_holidays_detected(self):
        """A store with no holiday rows disagrees with a non-zero mask."""
        with session_scope() as session:
            session.add(Store(name='Store 99'))
            session.add(StoreBitflag(name='Store 99', holidays=2))
        
        with session_scope() as session:
            mismatches = find_mismatches(session)
        
        self.assertEqual(mismatches, [{
            'store': 'Store 99',
            'normalized': [],
            'bitflag': ['Monday'],
            'holidays': 2
        }])

class TestBitflagRowChecks(SQLiteTestCase):
    """Bitflag rows that are invalid, duplicated or orphaned are reported."""
    
    def test_out_of_range_mask_reported(self):
        """A mask with bits beyond Saturday is listed, not raised."""
        with session_scope() as session:
            store = Store(name='Store 1')
            store.holidays = [StoreHoliday(day_of_week=DayOfWeek.MONDAY)]
            session.add(store)
            session.add(StoreBitflag(name='Store 1', holidays=130))
        
        with session_scope() as session:
            mismatches = find_mismatches(session)
            
            with self.assertRaises(ValidationError) as ctx:
                verify_consistency(session)
        
        self.assertEqual(mismatches, [{
            'store': 'Store 1',
            'normalized': ['Monday'],
            'bitflag': None,
            'holidays': 130
        }])
        self.assertEqual(ctx.exception.code, 'INCONSISTENT_HOLIDAYS')
    
    def test_duplicate_bitflag_rows_reported(self):
        with session_scope() as session:
            store = Store(name='Store 1')
            store.holidays = [StoreHoliday(day_of_week=DayOfWeek.MONDAY)]
            session.add(store)
            session.add(StoreBitflag(name='Store 1', holidays=2))
            session.add(StoreBitflag(name='Store 1', holidays=2))
        
        with session_scope() as session:
            mismatches = find_mismatches(session)
        
        self.assertEqual(len(mismatches), 1)
        self.assertEqual(mismatches[0]['store'], 'Store 1')
        self.assertEqual(mismatches[0]['bitflag_rows'], 2)
    
    def test_orphan_bitflag_row_reported(self):
        """A bitflag row whose name matches no store is listed."""
        with session_scope() as session:
            store = Store(name='Store 1')
            store.holidays = [StoreHoliday(day_of_week=DayOfWeek.MONDAY)]
            session.add(store)
            session.add(StoreBitflag(name='Store 1', holidays=2))
            session.add(StoreBitflag(name='Store 2', holidays=4))
        
        with session_scope() as session:
            mismatches = find_mismatches(session)
        
        self.assertEqual(mismatches, [{
            'store': 'Store 2',
            'normalized': None,
            'bitflag_rows': 1,
            'holidays': 4
        }])
    
    def test_duplicate_and_orphan_together(self):
        with session_scope() as session:
            store = Store(name='Store 1')
            store.holidays = [StoreHoliday(day_of_week=DayOfWeek.MONDAY)]
            session.add(store)
            session.add(StoreBitflag(name='Store 1', holidays=2))
            session.add(StoreBitflag(name='Store 1', holidays=2))
            session.add(StoreBitflag(name='Store 2', holidays=2))
        
        with session_scope() as session:
            stores = sorted(m['store'] for m in find_mismatches(session))
        
        self.assertEqual(stores, ['Store 1', 'Store 2'])

if __name__ == '__main__':
    unittest.main()
