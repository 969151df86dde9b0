"""
Tests for Hospital at Night status transitions.

These tests verify:
1. Completing today only leaves future dates open and the entry Pending
2. Completing all stamps every date and keeps earlier stamps
3. Reopening clears every stamp
4. Status is Complete exactly when every date is stamped
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from ward_handover.schemas.common import ReviewStatus
from ward_handover.schemas.hospital_at_night import HospitalAtNightEntry, ReviewDate
from ward_handover.services.review_status import (
    add_comment,
    change_status,
    complete_all,
    complete_today_only,
    derive_status,
    has_outstanding_future_dates,
    is_partially_complete,
    reopen,
)

TODAY = date(2025, 1, 20)
NOW = datetime(2025, 1, 20, 23, 15, tzinfo=timezone.utc)
LATER = NOW + timedelta(days=1)


def make_entry(*offsets: int, **overrides) -> HospitalAtNightEntry:
    data = {
        "id": "han1",
        "patient_id": "p1",
        "review_dates": [ReviewDate(date=TODAY + timedelta(days=o)) for o in offsets],
        "priority": "High",
        "assigned_roles": ["SpR"],
        "reason_for_review": "Deteriorating heart failure",
        "specialty": "Medicine",
        "created_at": NOW - timedelta(hours=6),
        "created_by": "Nurse Williams",
    }
    data.update(overrides)
    return HospitalAtNightEntry(**data)


def apply(entry: HospitalAtNightEntry, update) -> HospitalAtNightEntry:
    return entry.model_copy(update=update.changes())


class TestCompleteTodayOnly:
    """Tests for completing dates up to today."""

    def test_past_and_today_stamped_future_open(self):
        entry = make_entry(-1, 0, 1)

        updated = apply(entry, complete_today_only(entry, today=TODAY, now=NOW))

        assert [rd.completed_at for rd in updated.review_dates] == [NOW, NOW, None]
        assert updated.review_status == ReviewStatus.PENDING
        assert updated.status_changed_at is None
        assert is_partially_complete(updated)
        assert has_outstanding_future_dates(updated, today=TODAY)

    def test_only_past_dates_completes_entry(self):
        entry = make_entry(-2, 0)

        updated = apply(entry, complete_today_only(entry, today=TODAY, now=NOW))

        assert updated.review_status == ReviewStatus.COMPLETE
        assert updated.status_changed_at == NOW

    def test_existing_stamps_untouched(self):
        earlier = NOW - timedelta(days=1)
        entry = make_entry(-1, 0)
        entry.review_dates[0] = entry.review_dates[0].model_copy(update={"completed_at": earlier})

        updated = apply(entry, complete_today_only(entry, today=TODAY, now=NOW))

        assert [rd.completed_at for rd in updated.review_dates] == [earlier, NOW]

    def test_past_then_future_scenario(self):
        """Complete today's review, then everything once the future night has passed."""
        entry = make_entry(-1, 1)

        entry = apply(entry, complete_today_only(entry, today=TODAY, now=NOW))
        assert entry.review_status == ReviewStatus.PENDING
        assert entry.review_dates[1].completed_at is None

        entry = apply(entry, complete_all(entry, now=LATER))
        assert entry.review_status == ReviewStatus.COMPLETE
        assert entry.review_dates[0].completed_at == NOW
        assert entry.review_dates[1].completed_at == LATER
        assert entry.status_changed_at == LATER
        assert not is_partially_complete(entry)

    @pytest.mark.parametrize("days", [0, 1, 2, 3])
    def test_status_matches_stamps_over_successive_nights(self, days):
        entry = make_entry(0, 1, 2)
        for night in range(days + 1):
            entry = apply(
                entry,
                complete_today_only(entry, today=TODAY + timedelta(days=night), now=NOW),
            )
            all_done = all(rd.is_completed for rd in entry.review_dates)
            assert (entry.review_status == ReviewStatus.COMPLETE) == all_done


class TestCompleteAllAndReopen:
    """Tests for completing every date and reopening."""

    def test_complete_all(self):
        entry = make_entry(0, 1, 2)

        updated = apply(entry, complete_all(entry, now=NOW))

        assert all(rd.completed_at == NOW for rd in updated.review_dates)
        assert updated.review_status == ReviewStatus.COMPLETE
        assert updated.status_changed_at == NOW

    def test_reopen_clears_all_stamps(self):
        entry = apply(make_entry(-1, 0), complete_all(make_entry(-1, 0), now=NOW))

        reopened = apply(entry, reopen(entry))

        assert all(rd.completed_at is None for rd in reopened.review_dates)
        assert reopened.review_status == ReviewStatus.PENDING
        assert reopened.status_changed_at is None

    def test_change_status_dispatch(self):
        entry = make_entry(-1, 1)

        today_only = change_status(entry, ReviewStatus.COMPLETE, today_only=True, today=TODAY, now=NOW)
        everything = change_status(entry, ReviewStatus.COMPLETE, now=NOW)
        pending = change_status(entry, ReviewStatus.PENDING)

        assert today_only.review_status == ReviewStatus.PENDING
        assert everything.review_status == ReviewStatus.COMPLETE
        assert pending.review_status == ReviewStatus.PENDING
        assert "status_changed_at" in pending.changes()


class TestHelpers:
    """Tests for status helpers and comments."""

    def test_derive_status(self):
        stamped = ReviewDate(date=TODAY, completed_at=NOW)
        open_ = ReviewDate(date=TODAY)

        assert derive_status([stamped]) == ReviewStatus.COMPLETE
        assert derive_status([stamped, open_]) == ReviewStatus.PENDING
        assert derive_status([]) == ReviewStatus.PENDING

    def test_add_comment_appends(self):
        entry = make_entry(0)

        first = apply(entry, add_comment(entry, "Bloods sent", "Dr. Chen", now=NOW))
        second = apply(first, add_comment(first, "Reviewed", "Dr. Okafor", now=LATER))

        assert [c.text for c in second.comments] == ["Bloods sent", "Reviewed"]
        assert second.comments[1].created_at == LATER
        assert second.comments[0].id != second.comments[1].id
        assert entry.comments == []
