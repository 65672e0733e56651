from sqlalchemy import Boolean, Column, Date, ForeignKey, Index, Integer, Text, UniqueConstraint, text

from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()
metadata = Base.metadata


class Hospital(Base):
    __tablename__ = 'hospitals'

    id = Column(Integer, primary_key=True)
    slug = Column(Text, nullable=False, unique=True)
    name = Column(Text, nullable=False)
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))

    slot_templates = relationship('SlotTemplate', back_populates='hospital')
    capacity_overrides = relationship('CapacityOverride', back_populates='hospital')
    capacity_default = relationship('CapacityDefault', back_populates='hospital', uselist=False)
    bookings = relationship('Booking', back_populates='hospital')


class SlotTemplate(Base):
    __tablename__ = 'slot_templates'

    id = Column(Integer, primary_key=True)
    hospital_id = Column(ForeignKey('hospitals.id', ondelete='CASCADE'), nullable=False, index=True)
    dow = Column(Integer, nullable=False)  # 0 = Sunday ... 6 = Saturday
    start = Column(Text, nullable=False)  # "HH:MM"
    end = Column(Text, nullable=False)  # "HH:MM"
    capacity = Column(Integer, nullable=False, server_default=text('0'))

    hospital = relationship('Hospital', back_populates='slot_templates')


class CapacityOverride(Base):
    __tablename__ = 'capacity_overrides'
    __table_args__ = (
        UniqueConstraint('hospital_id', 'date', 'resource_key'),
    )

    id = Column(Integer, primary_key=True)
    hospital_id = Column(ForeignKey('hospitals.id', ondelete='CASCADE'), nullable=False)
    date = Column(Date, nullable=False)
    resource_key = Column(Text, nullable=False, server_default=text("''"))
    is_closed = Column(Boolean, nullable=False, server_default=text('1'))
    updated_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))

    hospital = relationship('Hospital', back_populates='capacity_overrides')


class CapacityDefault(Base):
    __tablename__ = 'capacity_defaults'

    id = Column(Integer, primary_key=True)
    hospital_id = Column(ForeignKey('hospitals.id', ondelete='CASCADE'), nullable=False, unique=True)
    basic_cap = Column(Integer, nullable=False, server_default=text('0'))
    nhis_cap = Column(Integer, nullable=False, server_default=text('0'))
    special_cap = Column(Integer, nullable=False, server_default=text('0'))

    hospital = relationship('Hospital', back_populates='capacity_default')


# Legacy day-level closures. Each row closes the basic resource for its date.

class SlotException(Base):
    __tablename__ = 'slot_exceptions'
    __table_args__ = (
        UniqueConstraint('hospital_id', 'date'),
    )

    id = Column(Integer, primary_key=True)
    hospital_id = Column(ForeignKey('hospitals.id', ondelete='CASCADE'), nullable=False)
    date = Column(Date, nullable=False)


class CalendarClose(Base):
    __tablename__ = 'calendar_closes'

    id = Column(Integer, primary_key=True)
    hospital_id = Column(ForeignKey('hospitals.id', ondelete='CASCADE'), nullable=False)
    date = Column(Date, nullable=False)


class DayClose(Base):
    __tablename__ = 'day_closes'

    id = Column(Integer, primary_key=True)
    hospital_id = Column(ForeignKey('hospitals.id', ondelete='CASCADE'), nullable=False)
    date = Column(Date, nullable=False)


class Holiday(Base):
    __tablename__ = 'holidays'

    id = Column(Integer, primary_key=True)
    hospital_id = Column(ForeignKey('hospitals.id', ondelete='CASCADE'), nullable=False)
    date = Column(Date, nullable=False)
    name = Column(Text)
    closed = Column(Boolean, nullable=False, server_default=text('1'))


class Booking(Base):
    __tablename__ = 'bookings'
    __table_args__ = (
        Index('ix_bookings_hospital_date', 'hospital_id', 'date'),
    )

    id = Column(Integer, primary_key=True)
    hospital_id = Column(ForeignKey('hospitals.id', ondelete='CASCADE'), nullable=False, index=True)
    date = Column(Date, nullable=False)
    status = Column(Text, nullable=False, server_default=text("'PENDING'"))
    created_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))

    hospital = relationship('Hospital', back_populates='bookings')
