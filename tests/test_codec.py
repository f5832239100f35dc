"""
Unit tests for the weekday bit-mask codec.
"""
import itertools
import random
import unittest

from holiday_bench.codec import ALL_DAYS_MASK, day_bit, decode, encode, parse_day
from holiday_bench.exceptions import ValidationError
from holiday_bench.models import DayOfWeek, WEEKDAYS

class TestEncode(unittest.TestCase):
    """Test cases for encoding weekday sets."""
    
    def test_encode_empty(self):
        """An empty set has no bits set."""
        self.assertEqual(encode([]), 0)
        self.assertEqual(encode(set()), 0)
    
    def test_encode_all_days(self):
        """All seven days set all seven bits."""
        self.assertEqual(encode(WEEKDAYS), 127)
        self.assertEqual(ALL_DAYS_MASK, 127)
    
    def test_fixed_bit_values(self):
        """Each weekday maps to its Sunday-first bit position."""
        expected = {
            DayOfWeek.SUNDAY: 1,
            DayOfWeek.MONDAY: 2,
            DayOfWeek.TUESDAY: 4,
            DayOfWeek.WEDNESDAY: 8,
            DayOfWeek.THURSDAY: 16,
            DayOfWeek.FRIDAY: 32,
            DayOfWeek.SATURDAY: 64,
        }
        for day, bit in expected.items():
            self.assertEqual(day_bit(day), bit)
            self.assertEqual(encode([day]), bit)
    
    def test_monday_and_friday(self):
        """Monday and Friday encode to 2 | 32."""
        self.assertEqual(encode([DayOfWeek.MONDAY, DayOfWeek.FRIDAY]), 34)
        self.assertEqual(encode(['Monday', 'Friday']), 34)
    
    def test_order_independent(self):
        """The same set in any order gives the same mask."""
        days = [DayOfWeek.SATURDAY, DayOfWeek.TUESDAY, DayOfWeek.SUNDAY, DayOfWeek.THURSDAY]
        expected = encode(days)
        
        for permutation in itertools.permutations(days):
            self.assertEqual(encode(permutation), expected)
    
    def test_duplicates_ignored(self):
        """Repeating a day does not change the mask."""
        self.assertEqual(encode([DayOfWeek.MONDAY, DayOfWeek.MONDAY]), 2)
    
    def test_labels_are_case_insensitive(self):
        """String labels are accepted in any case."""
        self.assertEqual(encode(['sunday', 'WEDNESDAY']), 9)
    
    def test_unknown_label_rejected(self):
        """Unknown labels raise instead of contributing no bits."""
        with self.assertRaises(ValidationError) as ctx:
            encode(['Monday', 'Funday'])
        self.assertEqual(ctx.exception.code, 'UNKNOWN_WEEKDAY')

class TestDecode(unittest.TestCase):
    """Test cases for decoding bit-masks."""
    
    def test_decode_zero(self):
        self.assertEqual(decode(0), frozenset())
    
    def test_decode_all(self):
        self.assertEqual(decode(127), frozenset(WEEKDAYS))
    
    def test_round_trip_all_subsets(self):
        """decode(encode(S)) == S for every subset of the week."""
        for size in range(len(WEEKDAYS) + 1):
            for subset in itertools.combinations(WEEKDAYS, size):
                self.assertEqual(decode(encode(subset)), frozenset(subset))
    
    def test_every_mask_round_trips(self):
        """encode(decode(m)) == m for every valid mask."""
        for mask in range(ALL_DAYS_MASK + 1):
            self.assertEqual(encode(decode(mask)), mask)
    
    def test_out_of_range_masks_rejected(self):
        """Masks with bits beyond Saturday or negative values are invalid."""
        for mask in (-1, 128, 255):
            with self.assertRaises(ValidationError):
                decode(mask)
    
    def test_non_integer_mask_rejected(self):
        with self.assertRaises(ValidationError):
            decode('34')
        with self.assertRaises(ValidationError):
            decode(True)

class TestParseDay(unittest.TestCase):
    """Test cases for weekday label parsing."""
    
    def test_parse_labels(self):
        self.assertEqual(parse_day('Monday'), DayOfWeek.MONDAY)
        self.assertEqual(parse_day(' friday '), DayOfWeek.FRIDAY)
        self.assertIs(parse_day(DayOfWeek.SUNDAY), DayOfWeek.SUNDAY)
    
    def test_parse_unknown(self):
        with self.assertRaises(ValidationError):
            parse_day('Someday')
    
    def test_random_sets_match_bit_sum(self):
        """For distinct days the mask equals the sum of their bits."""
        rng = random.Random(3)
        for _ in range(50):
            days = rng.sample(WEEKDAYS, rng.randint(0, 7))
            self.assertEqual(encode(days), sum(day_bit(day) for day in days))

if __name__ == '__main__':
    unittest.main()
