"""Tests for board and dashboard views."""

from datetime import date, datetime, timedelta, timezone

import pytest

from ward_handover.schemas.common import ReviewRole, ReviewStatus, ReviewType
from ward_handover.schemas.handover import HandoverNote
from ward_handover.schemas.hospital_at_night import HospitalAtNightEntry, ReviewDate
from ward_handover.schemas.patient import Patient
from ward_handover.services.aggregation import (
    dashboard_summary,
    entry_stats,
    filter_entries,
    join_entries,
    latest_handover_by_patient,
    natural_key,
    search_patients,
    sort_entries,
    sort_wards,
    ward_board,
)

TODAY = date(2025, 1, 20)
BASE = datetime(2025, 1, 20, 8, 0, tzinfo=timezone.utc)


def make_patient(pid: str, **overrides) -> Patient:
    data = {
        "id": pid,
        "nhs_number": "1234567890",
        "first_name": "John",
        "last_name": "Smith",
        "date_of_birth": date(1955, 3, 15),
        "ward": "Ward 1",
        "bed_number": "1A",
        "consultant": "Dr. Williams",
        "admission_date": date(2025, 1, 15),
        "diagnosis": "Community Acquired Pneumonia",
        "created_at": BASE,
        "updated_at": BASE,
    }
    data.update(overrides)
    return Patient(**data)


def make_note(nid: str, patient_id: str, minutes: int, shift_date: date = TODAY) -> HandoverNote:
    return HandoverNote(
        id=nid,
        patient_id=patient_id,
        created_by="Nurse Adams",
        created_at=BASE + timedelta(minutes=minutes),
        shift_date=shift_date,
        shift_type="Day",
        situation="S",
        background="B",
        assessment="A",
        recommendation="R",
    )


def make_entry(eid: str, patient_id: str = "p1", minutes: int = 0, **overrides) -> HospitalAtNightEntry:
    data = {
        "id": eid,
        "patient_id": patient_id,
        "review_dates": [ReviewDate(date=TODAY)],
        "priority": "Medium",
        "assigned_roles": ["FY1"],
        "reason_for_review": "Review",
        "specialty": "Medicine",
        "created_at": BASE + timedelta(minutes=minutes),
        "created_by": "Nurse Adams",
    }
    data.update(overrides)
    return HospitalAtNightEntry(**data)


class TestLatestHandover:
    """Tests for latest note selection."""

    def test_latest_is_max_created_at(self):
        notes = [make_note("h1", "p1", 5), make_note("h2", "p1", 30), make_note("h3", "p1", 10)]

        assert latest_handover_by_patient(notes)["p1"].id == "h2"

    def test_no_notes_means_absent(self):
        assert "p1" not in latest_handover_by_patient([make_note("h1", "p2", 0)])


class TestEntryViews:
    """Tests for joining, filtering, sorting and counting review entries."""

    def test_role_filter_keeps_tagged_entries_in_order(self):
        entries = [
            make_entry("e1", assigned_roles=["FY1"]),
            make_entry("e2", assigned_roles=["SpR"]),
            make_entry("e3", assigned_roles=["SHO", "Nurse"]),
            make_entry("e4", assigned_roles=["Discharge", "SpR"]),
            make_entry("e5", assigned_roles=["Nurse"]),
        ]
        joined = join_entries(entries, [make_patient("p1")], [])

        filtered = filter_entries(joined, roles=[ReviewRole.SPR])

        assert [e.id for e in filtered] == ["e2", "e4"]

    def test_empty_filters_match_everything(self):
        joined = join_entries([make_entry("e1"), make_entry("e2")], [], [])

        assert [e.id for e in filter_entries(joined)] == ["e1", "e2"]

    def test_date_filter_matches_any_review_date(self):
        tomorrow = TODAY + timedelta(days=1)
        entries = [
            make_entry("e1", review_dates=[ReviewDate(date=TODAY), ReviewDate(date=tomorrow)]),
            make_entry("e2", review_dates=[ReviewDate(date=TODAY)]),
        ]
        joined = join_entries(entries, [], [])

        assert [e.id for e in filter_entries(joined, review_date=tomorrow)] == ["e1"]

    def test_ward_filter_uses_joined_patient(self):
        patients = [make_patient("p1", ward="Ward 1"), make_patient("p2", ward="Ward 2")]
        entries = [make_entry("e1", "p1"), make_entry("e2", "p2"), make_entry("e3", "gone")]
        joined = join_entries(entries, patients, [])

        assert [e.id for e in filter_entries(joined, wards=["Ward 2"])] == ["e2"]
        assert joined[2].patient is None
        assert joined[2].latest_handover is None

    def test_status_and_type_filters(self):
        entries = [
            make_entry("e1", review_status="Complete"),
            make_entry("e2", review_type="Ad-hoc"),
            make_entry("e3"),
        ]
        joined = join_entries(entries, [], [])

        assert [e.id for e in filter_entries(joined, statuses=[ReviewStatus.PENDING])] == ["e2", "e3"]
        assert [e.id for e in filter_entries(joined, review_types=[ReviewType.SCHEDULED])] == [
            "e1",
            "e3",
        ]

    def test_join_attaches_latest_handover(self):
        notes = [make_note("h1", "p1", 0), make_note("h2", "p1", 60)]
        joined = join_entries([make_entry("e1")], [make_patient("p1")], notes)

        assert joined[0].latest_handover.id == "h2"
        assert joined[0].patient.id == "p1"

    def test_priority_sort_is_stable(self):
        entries = [
            make_entry("low", priority="Low"),
            make_entry("med1", priority="Medium"),
            make_entry("high", priority="High"),
            make_entry("med2", priority="Medium"),
        ]

        assert [e.id for e in sort_entries(entries, "priority")] == ["high", "med1", "med2", "low"]

    def test_time_sorts(self):
        entries = [make_entry("b", minutes=10), make_entry("a", minutes=0), make_entry("c", minutes=20)]

        assert [e.id for e in sort_entries(entries, "oldest")] == ["a", "b", "c"]
        assert [e.id for e in sort_entries(entries, "newest")] == ["c", "b", "a"]

    def test_stats(self):
        entries = [
            make_entry("e1", priority="High", assigned_roles=["SpR", "SHO"]),
            make_entry("e2", priority="High", review_status="Complete", assigned_roles=["SpR"]),
            make_entry("e3", priority="Low", assigned_roles=["Nurse"]),
        ]

        stats = entry_stats(entries)

        assert stats.total == 3
        assert stats.pending == 2
        assert stats.complete == 1
        assert stats.high_priority_pending == 1
        assert stats.pending_by_role == {"FY1": 0, "SHO": 1, "SpR": 1, "Discharge": 0, "Nurse": 1}


class TestWardsAndPatients:
    """Tests for ward ordering, search and boards."""

    def test_sort_wards_numeric_aware(self):
        wards = ["Ward 10", "AMU", "Ward 2", "Ward 1", "CCU", "Ward 2"]

        assert sort_wards(wards) == ["Ward 1", "Ward 2", "Ward 10", "AMU", "CCU"]

    def test_sort_wards_ignores_case_for_named_wards(self):
        wards = ["ccu", "AMU", "Ward 1", "bmu"]

        assert sort_wards(wards) == ["Ward 1", "AMU", "bmu", "ccu"]

    def test_natural_key_orders_beds(self):
        beds = ["10A", "2B", "1A", "Side room 2", "2A"]

        assert sorted(beds, key=natural_key) == ["1A", "2A", "2B", "10A", "Side room 2"]

    @pytest.mark.parametrize(
        "term,ward,expected",
        [
            ("", None, ["p1", "p2", "p3"]),
            ("SMITH", None, ["p1"]),
            ("pneumonia", None, ["p1", "p3"]),
            ("987 654", None, ["p2"]),
            ("", "Ward 2", ["p3"]),
            ("", "all", ["p1", "p2", "p3"]),
            ("pneumonia", "Ward 1", ["p1"]),
        ],
    )
    def test_search_patients(self, term, ward, expected):
        patients = [
            make_patient("p1"),
            make_patient(
                "p2", first_name="Ada", last_name="Jones", nhs_number="9876543210", diagnosis="AKI"
            ),
            make_patient("p3", first_name="Ivy", last_name="Lee", ward="Ward 2"),
        ]

        assert [p.id for p in search_patients(patients, term, ward)] == expected

    def test_ward_board(self):
        patients = [
            make_patient("p1", bed_number="10A", early_warning_score=7),
            make_patient("p2", bed_number="2B", early_warning_score=2),
            make_patient("p3", bed_number="1A", is_active=False),
            make_patient("p4", ward="Ward 2"),
        ]
        notes = [make_note("h1", "p1", 0)]

        board = ward_board(patients, notes, "Ward 1", beds_per_ward=28, high_news_threshold=5)
        high_only = ward_board(
            patients, notes, "Ward 1", beds_per_ward=28, high_news_threshold=5, high_news_only=True
        )

        assert [p.id for p in board.patients] == ["p2", "p1"]
        assert board.patients[1].latest_handover.id == "h1"
        assert board.occupied_beds == 2
        assert board.empty_beds == 26
        assert board.high_news_count == 1
        assert [p.id for p in high_only.patients] == ["p1"]

    def test_dashboard_summary(self):
        patients = [
            make_patient("p1", early_warning_score=5),
            make_patient("p2", early_warning_score=8, ward="Ward 10"),
            make_patient("p3", early_warning_score=None, ward="Ward 2"),
        ]
        notes = [make_note(f"h{i}", "p1", i, shift_date=TODAY - timedelta(days=i % 2)) for i in range(7)]

        summary = dashboard_summary(patients, notes, today=TODAY, high_news_threshold=5)

        assert summary.total_patients == 3
        assert summary.high_news_count == 2
        assert [p.id for p in summary.priority_patients] == ["p2", "p1"]
        assert summary.today_handovers == 4
        assert summary.wards == ["Ward 1", "Ward 2", "Ward 10"]
        assert [n.id for n in summary.recent_handovers] == ["h6", "h5", "h4", "h3", "h2"]
        assert summary.recent_handovers[0].patient.id == "p1"
