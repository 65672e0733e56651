from datetime import date

from checkup_capacity.models import (
    CalendarClose,
    CapacityOverride,
    DayClose,
    Holiday,
    SlotException,
)
from checkup_capacity.services.capacity import CapacityRepository, OverrideStore

WEDNESDAY = date(2026, 10, 21)
THURSDAY = date(2026, 10, 22)


def stored(db, hospital):
    rows = (
        db.query(CapacityOverride)
        .filter(CapacityOverride.hospital_id == hospital.id)
        .order_by(CapacityOverride.date, CapacityOverride.resource_key)
        .all()
    )
    return [(r.date, r.resource_key, bool(r.is_closed)) for r in rows]


def test_absent_record_is_not_hard_closed(db, hospital):
    store = OverrideStore(CapacityRepository(db))
    assert store.is_hard_closed(hospital.id, WEDNESDAY, "basic") is False
    assert store.is_hard_closed(hospital.id, WEDNESDAY, "col") is False


def test_upsert_then_read(db, hospital):
    store = OverrideStore(CapacityRepository(db))
    store.upsert(hospital.id, WEDNESDAY, "col", True)

    assert store.is_hard_closed(hospital.id, WEDNESDAY, "col") is True
    assert store.is_hard_closed(hospital.id, WEDNESDAY, "cscope") is True
    assert store.is_hard_closed(hospital.id, WEDNESDAY, "egd") is False
    assert store.is_hard_closed(hospital.id, THURSDAY, "col") is False


def test_upsert_is_idempotent(db, hospital):
    store = OverrideStore(CapacityRepository(db))
    store.upsert(hospital.id, WEDNESDAY, "egd", True)
    first = stored(db, hospital)
    store.upsert(hospital.id, WEDNESDAY, "egd", True)
    assert stored(db, hospital) == first == [(WEDNESDAY, "egd", True)]


def test_last_write_wins(db, hospital):
    store = OverrideStore(CapacityRepository(db))
    store.upsert(hospital.id, WEDNESDAY, "egd", True)
    store.upsert(hospital.id, WEDNESDAY, "egd", False)
    assert stored(db, hospital) == [(WEDNESDAY, "egd", False)]
    assert store.is_hard_closed(hospital.id, WEDNESDAY, "egd") is False


def test_special_is_stored_as_col(db, hospital):
    store = OverrideStore(CapacityRepository(db))
    obj = store.upsert(hospital.id, WEDNESDAY, "special", True)
    assert obj.resource_key == "col"
    store.upsert(hospital.id, WEDNESDAY, "col", True)
    assert stored(db, hospital) == [(WEDNESDAY, "col", True)]


def test_legacy_keys_are_read_and_folded(db, hospital, make_override):
    make_override(hospital, WEDNESDAY, "COL")
    make_override(hospital, THURSDAY, "")
    store = OverrideStore(CapacityRepository(db))

    closures = store.closures(hospital.id, WEDNESDAY, date(2026, 10, 23))
    assert closures == {
        WEDNESDAY: frozenset({"col"}),
        THURSDAY: frozenset({"basic"}),
    }

    store.upsert(hospital.id, WEDNESDAY, "special", False)
    assert stored(db, hospital) == [
        (WEDNESDAY, "col", False),
        (THURSDAY, "", True),
    ]


def test_explicit_open_record_does_not_close(db, hospital, make_override):
    make_override(hospital, WEDNESDAY, "basic", is_closed=False)
    store = OverrideStore(CapacityRepository(db))
    assert store.closures(hospital.id, WEDNESDAY, THURSDAY) == {}


def test_legacy_day_closures_close_basic_only(db, hospital):
    db.add_all([
        SlotException(hospital_id=hospital.id, date=date(2026, 10, 5)),
        CalendarClose(hospital_id=hospital.id, date=date(2026, 10, 6)),
        DayClose(hospital_id=hospital.id, date=date(2026, 10, 7)),
        Holiday(hospital_id=hospital.id, date=date(2026, 10, 9), name="Hangul Day", closed=True),
        Holiday(hospital_id=hospital.id, date=date(2026, 10, 10), name="Open holiday", closed=False),
    ])
    db.commit()
    store = OverrideStore(CapacityRepository(db))

    closures = store.closures(hospital.id, date(2026, 10, 1), date(2026, 11, 1))
    assert closures == {
        date(2026, 10, 5): frozenset({"basic"}),
        date(2026, 10, 6): frozenset({"basic"}),
        date(2026, 10, 7): frozenset({"basic"}),
        date(2026, 10, 9): frozenset({"basic"}),
    }


def test_reopening_basic_clears_slot_exception(db, hospital):
    db.add(SlotException(hospital_id=hospital.id, date=WEDNESDAY))
    db.add(Holiday(hospital_id=hospital.id, date=THURSDAY, closed=True))
    db.commit()
    store = OverrideStore(CapacityRepository(db))
    assert store.is_hard_closed(hospital.id, WEDNESDAY, "basic") is True

    store.upsert(hospital.id, WEDNESDAY, "basic", False)
    store.upsert(hospital.id, THURSDAY, "basic", False)

    assert store.is_hard_closed(hospital.id, WEDNESDAY, "basic") is False
    # holidays are not touched by the toggle
    assert store.is_hard_closed(hospital.id, THURSDAY, "basic") is True


def test_overrides_are_tenant_scoped(db, hospital, other_hospital):
    store = OverrideStore(CapacityRepository(db))
    store.upsert(hospital.id, WEDNESDAY, "basic", True)
    assert store.is_hard_closed(hospital.id, WEDNESDAY, "basic") is True
    assert store.is_hard_closed(other_hospital.id, WEDNESDAY, "basic") is False


def test_conflicting_insert_is_retried_in_full(db, hospital, make_override, monkeypatch):
    # Another writer stored the basic row between our read and our insert
    db.add(SlotException(hospital_id=hospital.id, date=WEDNESDAY))
    db.commit()
    make_override(hospital, WEDNESDAY, "basic", is_closed=True)

    repo = CapacityRepository(db)
    list_overrides = repo.list_overrides
    calls = []

    def stale_first_read(tenant_id, start, end):
        calls.append(start)
        if len(calls) == 1:
            return []
        return list_overrides(tenant_id, start, end)

    monkeypatch.setattr(repo, "list_overrides", stale_first_read)
    store = OverrideStore(repo)

    obj = store.upsert(hospital.id, WEDNESDAY, "basic", False)

    assert len(calls) >= 2
    assert obj.is_closed is False
    assert stored(db, hospital) == [(WEDNESDAY, "basic", False)]
    assert db.query(SlotException).count() == 0
    assert store.is_hard_closed(hospital.id, WEDNESDAY, "basic") is False
