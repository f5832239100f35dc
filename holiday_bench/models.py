# holiday_bench/models.py
from sqlalchemy import Column, Integer, String, ForeignKey, Enum
from sqlalchemy.orm import declarative_base, relationship
import enum

Base = declarative_base()

class DayOfWeek(enum.Enum):
    """Weekday labels, in Sunday-first order.
    
    The member order is significant: a day's position is its bit index in
    the store_bitflag.holidays mask (SUNDAY -> bit 0 ... SATURDAY -> bit 6).
    """
    SUNDAY = 'Sunday'
    MONDAY = 'Monday'
    TUESDAY = 'Tuesday'
    WEDNESDAY = 'Wednesday'
    THURSDAY = 'Thursday'
    FRIDAY = 'Friday'
    SATURDAY = 'Saturday'

    def __str__(self):
        """Return the string value of the enum."""
        return self.value

    @classmethod
    def from_string(cls, value: str) -> 'DayOfWeek':
        """Create a DayOfWeek from its label, ignoring case.
        
        Args:
            value: Weekday label ('Monday', 'monday', 'MONDAY')
            
        Returns:
            DayOfWeek enum value
            
        Raises:
            ValueError if the label is not a weekday
        """
        for day in cls:
            if day.value.lower() == str(value).strip().lower():
                return day
        raise ValueError(
            f"Invalid weekday: {value}. Valid values are: {', '.join(d.value for d in cls)}"
        )

WEEKDAYS = list(DayOfWeek)

class Store(Base):
    __tablename__ = 'store'
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    
    holidays = relationship(
        'StoreHoliday',
        back_populates='store',
        cascade='all, delete-orphan',
        passive_deletes=True
    )
    
    def __repr__(self):
        return f"<Store(id={self.id}, name='{self.name}')>"

class StoreHoliday(Base):
    """Normalized representation: one row per store and closing day."""
    __tablename__ = 'store_holiday'
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    store_id = Column(Integer, ForeignKey('store.id', ondelete='CASCADE'), nullable=False)
    day_of_week = Column(
        Enum(
            DayOfWeek,
            name='day_of_week',
            values_callable=lambda days: [day.value for day in days],
            validate_strings=True,
            create_constraint=True
        ),
        nullable=False
    )
    
    store = relationship('Store', back_populates='holidays')
    
    def __repr__(self):
        return f"<StoreHoliday(store_id={self.store_id}, day_of_week='{self.day_of_week}')>"

class StoreBitflag(Base):
    """Denormalized representation: one row per store, closing days as a bit-mask."""
    __tablename__ = 'store_bitflag'
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    holidays = Column(Integer, nullable=False)
    
    def __repr__(self):
        return f"<StoreBitflag(id={self.id}, name='{self.name}', holidays={self.holidays})>"

# Drop order: children before parents
BENCHMARK_TABLES = (StoreBitflag.__table__, StoreHoliday.__table__, Store.__table__)
