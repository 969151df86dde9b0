"""Optional demo data seeding (development only)."""

from datetime import date, timedelta

from ward_handover.core.logging import get_logger
from ward_handover.models.base import utcnow
from ward_handover.schemas.handover import HandoverNoteCreate
from ward_handover.schemas.hospital_at_night import HospitalAtNightCreate
from ward_handover.schemas.patient import PatientCreate
from ward_handover.services.review_status import add_comment
from ward_handover.services.storage import Storage

logger = get_logger(__name__)


DEMO_PATIENTS = [
    {
        "nhs_number": "1234567890",
        "first_name": "John",
        "last_name": "Smith",
        "date_of_birth": date(1955, 3, 15),
        "ward": "Ward 1",
        "bed_number": "1A",
        "consultant": "Dr. Williams",
        "diagnosis": "Community Acquired Pneumonia",
        "allergies": "Penicillin",
        "resuscitation_status": "Full",
        "early_warning_score": 3,
    },
    {
        "nhs_number": "2345678901",
        "first_name": "Mary",
        "last_name": "Johnson",
        "date_of_birth": date(1948, 7, 22),
        "ward": "Ward 1",
        "bed_number": "2B",
        "consultant": "Dr. Thompson",
        "diagnosis": "Acute Kidney Injury",
        "resuscitation_status": "Full",
        "early_warning_score": 5,
    },
    {
        "nhs_number": "6789012345",
        "first_name": "Patricia",
        "last_name": "Taylor",
        "date_of_birth": date(1960, 8, 14),
        "ward": "Ward 1",
        "bed_number": "10A",
        "consultant": "Dr. Williams",
        "diagnosis": "Diabetic Ketoacidosis",
        "allergies": "Sulfonamides",
        "resuscitation_status": "Full",
        "early_warning_score": 4,
    },
    {
        "nhs_number": "3456789012",
        "first_name": "Robert",
        "last_name": "Brown",
        "date_of_birth": date(1940, 11, 3),
        "ward": "Ward 2",
        "bed_number": "1",
        "consultant": "Dr. Patel",
        "diagnosis": "Congestive Heart Failure",
        "allergies": "NKDA",
        "resuscitation_status": "DNACPR",
        "early_warning_score": 7,
    },
    {
        "nhs_number": "4567890123",
        "first_name": "Susan",
        "last_name": "Davies",
        "date_of_birth": date(1972, 1, 30),
        "ward": "Ward 2",
        "bed_number": "4",
        "consultant": "Dr. Patel",
        "diagnosis": "Urinary Tract Infection with Sepsis",
        "early_warning_score": 6,
    },
    {
        "nhs_number": "5678901234",
        "first_name": "Arthur",
        "last_name": "Evans",
        "date_of_birth": date(1938, 5, 9),
        "ward": "Ward 10",
        "bed_number": "3",
        "consultant": "Mr. Hughes",
        "diagnosis": "Fractured Neck of Femur",
        "allergies": "Codeine",
        "resuscitation_status": "Not Discussed",
        "early_warning_score": 2,
    },
]

# Keyed by the patient's NHS number; shift dates are days before today.
DEMO_HANDOVER_NOTES = [
    {
        "nhs_number": "1234567890",
        "created_by": "Nurse Adams",
        "days_ago": 0,
        "shift_type": "Day",
        "situation": "Admitted with productive cough, fever and shortness of breath. "
        "Chest X-ray confirmed right lower lobe pneumonia.",
        "background": "70-year-old male with Type 2 Diabetes and Hypertension. "
        "Lives alone, independent with ADLs.",
        "assessment": "Temp 38.2, HR 95, BP 135/82, RR 22, SpO2 94% on 2L O2. "
        "Crackles right base. IV antibiotics started.",
        "recommendation": "Continue IV Co-amoxiclav. Monitor oxygen requirements. "
        "Repeat bloods tomorrow.",
    },
    {
        "nhs_number": "2345678901",
        "created_by": "Dr. Chen",
        "days_ago": 0,
        "shift_type": "Day",
        "situation": "AKI on background of CKD stage 3. Creatinine 280 from baseline 120.",
        "background": "76-year-old female with CKD3 and osteoarthritis. Recently started on NSAIDs.",
        "assessment": "Clinically dry. USS kidneys shows no obstruction. Likely pre-renal.",
        "recommendation": "Stop NSAIDs. IV fluids 1L over 8 hours. Strict fluid balance. "
        "Recheck U&Es in morning.",
    },
    {
        "nhs_number": "3456789012",
        "created_by": "Nurse Williams",
        "days_ago": 1,
        "shift_type": "Night",
        "situation": "Increasing breathlessness overnight, now on 4L O2.",
        "background": "Heart failure with reduced ejection fraction. DNACPR in place.",
        "assessment": "Bibasal crackles, JVP raised, +1.8L fluid balance over 24 hours.",
        "recommendation": "Daily weights. Fluid restriction 1.5L. Medical review for IV furosemide.",
    },
    {
        "nhs_number": "5678901234",
        "created_by": "Nurse Okafor",
        "days_ago": 1,
        "shift_type": "Long Day",
        "situation": "Post-op day 1 following hemiarthroplasty.",
        "background": "Mechanical fall at home. Lives with daughter.",
        "assessment": "Wound clean and dry. Pain controlled on regular paracetamol.",
        "recommendation": "Physio to mobilise today. Orthogeriatric review.",
    },
]

# review_dates are day offsets from today
DEMO_REVIEW_ENTRIES = [
    {
        "nhs_number": "3456789012",
        "review_dates": [0, 1],
        "priority": "High",
        "assigned_roles": ["SpR"],
        "reason_for_review": "Deteriorating heart failure. Senior review for escalation "
        "of diuretic therapy.",
        "specialty": "Medicine",
        "created_by": "Nurse Williams",
        "comment": ("Cardiology aware, will review in morning if still on >4L O2", "Dr. Thompson"),
    },
    {
        "nhs_number": "4567890123",
        "review_dates": [0],
        "priority": "High",
        "assigned_roles": ["SpR", "SHO"],
        "reason_for_review": "NEWS 6, sepsis secondary to UTI. Escalate if not responding "
        "to antibiotics.",
        "specialty": "Medicine",
        "created_by": "Dr. Thompson",
    },
    {
        "nhs_number": "2345678901",
        "review_dates": [0],
        "priority": "Medium",
        "assigned_roles": ["FY1"],
        "reason_for_review": "Repeat U&Es at 22:00 and review fluid prescription.",
        "specialty": "Medicine",
        "created_by": "Dr. Chen",
    },
    {
        "nhs_number": "5678901234",
        "review_dates": [0],
        "priority": "Low",
        "assigned_roles": ["Nurse"],
        "reason_for_review": "Check wound dressing and analgesia overnight.",
        "review_type": "Ad-hoc",
        "specialty": "T+O",
        "created_by": "Nurse Okafor",
    },
    {
        "nhs_number": "1234567890",
        "review_dates": [0, 1],
        "priority": "Medium",
        "assigned_roles": ["SHO", "Discharge"],
        "reason_for_review": "Review oxygen requirement; TTO if weaned to room air.",
        "specialty": "Medicine",
        "created_by": "Nurse Adams",
    },
]


async def _seed(storage: Storage, today: date) -> int:
    patient_ids: dict[str, str] = {}
    for demo in DEMO_PATIENTS:
        patient = await storage.patients.create(
            PatientCreate(admission_date=today - timedelta(days=2), **demo)
        )
        patient_ids[patient.nhs_number] = patient.id

    for demo in DEMO_HANDOVER_NOTES:
        fields = {k: v for k, v in demo.items() if k not in ("nhs_number", "days_ago")}
        await storage.handover_notes.create(
            HandoverNoteCreate(
                patient_id=patient_ids[demo["nhs_number"]],
                shift_date=today - timedelta(days=demo["days_ago"]),
                **fields,
            )
        )

    for demo in DEMO_REVIEW_ENTRIES:
        fields = {
            k: v
            for k, v in demo.items()
            if k not in ("nhs_number", "review_dates", "comment")
        }
        entry = await storage.hospital_at_night.create(
            HospitalAtNightCreate(
                patient_id=patient_ids[demo["nhs_number"]],
                review_dates=[
                    {"date": today + timedelta(days=offset)} for offset in demo["review_dates"]
                ],
                **fields,
            )
        )
        if "comment" in demo:
            text, author = demo["comment"]
            await storage.hospital_at_night.update(entry.id, add_comment(entry, text, author))

    return len(patient_ids)


async def seed_demo_data(storage: Storage, today: date | None = None) -> int:
    """Insert demo patients, notes and review entries into an empty store."""
    if not await storage.is_empty():
        logger.info("Store already initialized, skipping demo data", backend=storage.backend)
        return 0

    inserted = await _seed(storage, today or utcnow().date())
    await storage.mark_seeded()
    logger.warning("Demo data seeded", backend=storage.backend, patients=inserted)
    return inserted


async def reset_demo_data(storage: Storage, today: date | None = None) -> int:
    """Wipe every record and reseed."""
    removed = await storage.clear()
    logger.warning("Store cleared", backend=storage.backend, patients=removed)
    inserted = await _seed(storage, today or utcnow().date())
    await storage.mark_seeded()
    logger.warning("Demo data seeded", backend=storage.backend, patients=inserted)
    return inserted


async def purge_demo_data(storage: Storage, dry_run: bool = True) -> int:
    """Delete demo patients (matched by NHS number and name) with their dependents.

    Returns the number of patients matched on a dry run, deleted otherwise.
    """
    demo_names = {(p["nhs_number"], p["first_name"], p["last_name"]) for p in DEMO_PATIENTS}
    matched = [
        p
        for p in await storage.patients.list_all(active_only=False)
        if (p.nhs_number, p.first_name, p.last_name) in demo_names
    ]

    if dry_run:
        logger.info("Demo patients matched", backend=storage.backend, count=len(matched))
        return len(matched)

    deleted = 0
    for patient in matched:
        if await storage.patients.delete(patient.id):
            deleted += 1
    logger.warning("Demo patients purged", backend=storage.backend, count=deleted)
    return deleted
