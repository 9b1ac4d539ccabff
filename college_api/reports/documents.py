"""
Hall ticket, result and fee structure documents.

Each ``build_*_layout`` function turns one student record snapshot into a
``DocumentLayout``; ``render_*`` wraps it into a downloadable PDF. Missing
optional values always show up as "N/A" (or 0 for amounts), never blank.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple

from ..schemas.student import FinancialInfo, HostelInfo, StudentDetail
from .layout import PLACEHOLDER, DocumentLayout, LayoutBuilder, IDENTITY_TOP
from .renderer import PDF_MEDIA_TYPE, render_pdf

DEFAULT_TUITION_FEES = 40000
DEFAULT_HOSTEL_FEES = 15000

EXAM_INSTRUCTIONS = [
    "1. This Hall Ticket is mandatory for appearing in examinations",
    "2. Carry valid ID proof along with this hall ticket",
    "3. Report 30 minutes before the examination time",
    "4. No electronic devices are allowed in examination hall",
    "5. Follow all examination rules and regulations",
]

SAMPLE_SUBJECTS = [
    ["Subject Code", "Subject Name", "Credits", "Grade", "Points"],
    ["CS101", "Computer Programming", "4", "A", "9.0"],
    ["CS102", "Data Structures", "4", "A-", "8.5"],
    ["CS103", "Database Systems", "3", "B+", "8.0"],
    ["CS104", "Computer Networks", "3", "A", "9.0"],
]

# Helvetica has no rupee glyph
FIXED_FEE_COMPONENTS = [
    ("Tuition Fee", "25,000"),
    ("Laboratory Fee", "5,000"),
    ("Library Fee", "2,000"),
    ("Examination Fee", "3,000"),
    ("Sports Fee", "1,000"),
    ("Student Activity Fee", "1,500"),
    ("Development Fee", "2,500"),
]
FEE_DUE_DATE = "15th Aug"

PAYMENT_INSTRUCTIONS = [
    "1. All fees must be paid before the due date",
    "2. Late payment will incur a penalty of Rs. 500 per week",
    "3. Payment can be made online or at the accounts office",
    "4. Keep payment receipts for future reference",
    "5. Partial payments are not accepted",
]


@dataclass
class RenderedDocument:
    content: bytes
    filename: str
    media_type: str = PDF_MEDIA_TYPE


@dataclass
class FeeSummary:
    tuition: float
    hostel: float
    total: float
    scholarship: float
    paid: float
    balance: float


def compute_fee_summary(financial: FinancialInfo, hostel: HostelInfo) -> FeeSummary:
    """Fee totals; a stored amount of zero means "not set" and falls back to the default."""
    tuition = financial.total_fees or DEFAULT_TUITION_FEES
    hostel_fees = (hostel.hostel_fees or DEFAULT_HOSTEL_FEES) if hostel.is_hostelite else 0
    total = tuition + hostel_fees
    scholarship = financial.scholarship_amount or 0
    paid = financial.paid_fees or 0
    return FeeSummary(
        tuition=tuition,
        hostel=hostel_fees,
        total=total,
        scholarship=scholarship,
        paid=paid,
        balance=total - scholarship - paid,
    )


def _snapshot(record) -> StudentDetail:
    if isinstance(record, StudentDetail):
        return record
    return StudentDetail.model_validate(record)


def _date(value) -> str:
    return value.strftime("%d/%m/%Y") if value else PLACEHOLDER


def _or_na(value):
    return value if value not in (None, "") else PLACEHOLDER


def _name(student: StudentDetail) -> str:
    if not student.user:
        return PLACEHOLDER
    return f"{student.user.first_name} {student.user.last_name}"


def _title_block(builder: LayoutBuilder, title: str, student: StudentDetail, subtitle: str, now: datetime):
    builder.heading(title, size=24, bold=True, gap=12)
    builder.heading(student.academic_info.college_name or "College Name", size=16, bold=True)
    builder.heading(subtitle)
    builder.heading(f"Generated on: {now.strftime('%d/%m/%Y')} at {now.strftime('%H:%M:%S')}", size=10)
    builder.move_to(max(builder.y, IDENTITY_TOP))


def _identity_rows(student: StudentDetail, fee_category: bool = False) -> List[Tuple[str, object]]:
    academic = student.academic_info
    address = student.address
    rows = [
        ("Student ID:", student.student_id),
        ("Name:", _name(student)),
        ("Date of Birth:", _date(student.date_of_birth)),
        ("Gender:", student.gender),
        ("Phone:", student.phone),
        ("Email:", student.user.email if student.user else PLACEHOLDER),
        ("Address:", f"{address.street}, {address.city}, {address.state} {address.zip_code}"),
        ("Department:", academic.department),
        ("Course:", academic.course),
        ("Specialization:", _or_na(academic.specialization)),
    ]
    if fee_category:
        rows.append(("Fee Category:", student.financial_info.fee_structure))
    rows += [
        ("Year:", f"{academic.year} Year"),
        ("Semester:", f"{academic.semester} Semester"),
    ]
    return rows


def _academic_year(now: datetime) -> str:
    return f"Academic Year: {now.year}-{now.year + 1}"


def _footer(now: datetime) -> str:
    return f"Generated on: {now.strftime('%d/%m/%Y')}"


def build_hall_ticket_layout(record, now: Optional[datetime] = None) -> DocumentLayout:
    student = _snapshot(record)
    now = now or datetime.now()
    academic = student.academic_info
    guardian = student.guardian_info
    hostel = student.hostel_info
    placement = student.placement_info

    builder = LayoutBuilder("Hall Ticket")
    _title_block(builder, "HALL TICKET", student, _academic_year(now), now)
    builder.rows(_identity_rows(student))

    builder.section("ACADEMIC DETAILS")
    builder.rows([
        ("College Name:", _or_na(academic.college_name)),
        ("Specialization:", _or_na(academic.specialization)),
        ("Total Credits:", academic.total_credits or 0),
        ("Earned Credits:", academic.earned_credits or 0),
        ("Current CGPA:", academic.cgpa or 0),
        ("Attendance %:", f"{academic.attendance_percentage or 0:g}%"),
        ("Enrollment Date:", _date(student.enrollment_date)),
        ("Status:", student.status),
    ])

    builder.section("GUARDIAN INFORMATION")
    builder.rows([
        ("Guardian Name:", _or_na(guardian.name)),
        ("Relationship:", _or_na(guardian.relationship)),
        ("Phone:", _or_na(guardian.phone)),
        ("Email:", _or_na(guardian.email)),
    ])

    builder.section("ADDITIONAL INFORMATION")
    builder.rows([
        ("Hostel Status:", "Yes" if hostel.is_hostelite else "No"),
        ("Hostel Name:", _or_na(hostel.hostel_name) if hostel.is_hostelite else PLACEHOLDER),
        ("Room Number:", _or_na(hostel.room_number) if hostel.is_hostelite else PLACEHOLDER),
        ("Placement Status:", "Yes" if placement.is_placed else "No"),
        ("Company:", _or_na(placement.company_name) if placement.is_placed else PLACEHOLDER),
        ("Package (LPA):", (placement.package or PLACEHOLDER) if placement.is_placed else PLACEHOLDER),
        ("Last Attendance:", _date(student.last_attendance_date)),
        ("Remarks:", _or_na(student.remarks)),
    ])

    builder.section("IMPORTANT INSTRUCTIONS:", size=12)
    builder.lines(EXAM_INSTRUCTIONS)
    return builder.build(_footer(now))


def build_result_layout(record, now: Optional[datetime] = None) -> DocumentLayout:
    student = _snapshot(record)
    now = now or datetime.now()
    academic = student.academic_info
    performance = student.academic_performance

    builder = LayoutBuilder("Academic Result")
    _title_block(builder, "ACADEMIC RESULT", student,
                 f"Result for: {academic.year} Year, {academic.semester} Semester", now)
    builder.rows(_identity_rows(student))

    builder.section("ACADEMIC PERFORMANCE")
    builder.rows([
        ("Current Semester GPA:", performance.current_semester_gpa or PLACEHOLDER),
        ("Previous Semester GPA:", performance.previous_semester_gpa or PLACEHOLDER),
        ("CGPA:", academic.cgpa or 0),
        ("Total Credits:", academic.total_credits or 0),
        ("Earned Credits:", academic.earned_credits or 0),
        ("Attendance %:", f"{academic.attendance_percentage or 0:g}%"),
        ("Total Backlogs:", performance.total_backlogs or 0),
        ("Cleared Backlogs:", performance.cleared_backlogs or 0),
        ("Enrollment Date:", _date(student.enrollment_date)),
        ("Status:", student.status),
    ])

    # fixed sample grid, per-subject grades are not stored on the record
    builder.section("SUBJECT-WISE RESULTS")
    builder.grid(SAMPLE_SUBJECTS)

    builder.section("ACADEMIC SUMMARY:", size=12)
    builder.rows([
        ("Enrollment Date:", _date(student.enrollment_date)),
        ("Current Status:", student.status),
        ("College Name:", _or_na(academic.college_name)),
        ("Specialization:", _or_na(academic.specialization)),
        ("Total Backlogs:", performance.total_backlogs or 0),
        ("Cleared Backlogs:", performance.cleared_backlogs or 0),
        ("Last Attendance:", _date(student.last_attendance_date)),
        ("Remarks:", _or_na(student.remarks)),
    ], size=10, step=20)
    return builder.build(_footer(now))


def build_fee_structure_layout(record, now: Optional[datetime] = None) -> DocumentLayout:
    student = _snapshot(record)
    now = now or datetime.now()
    hostel = student.hostel_info
    fees = compute_fee_summary(student.financial_info, hostel)

    builder = LayoutBuilder("Fee Structure")
    _title_block(builder, "FEE STRUCTURE", student, _academic_year(now), now)
    builder.rows(_identity_rows(student, fee_category=True))

    builder.section("FEE BREAKDOWN")
    breakdown = [["Fee Component", "Amount (Rs.)", "Due Date", "Status"]]
    breakdown += [[name, amount, FEE_DUE_DATE, "Paid"] for name, amount in FIXED_FEE_COMPONENTS]
    breakdown += [
        ["Hostel Fee", fees.hostel if hostel.is_hostelite else PLACEHOLDER, FEE_DUE_DATE,
         "Paid" if hostel.is_hostelite else PLACEHOLDER],
        ["", "", "", ""],
        ["Total Academic Fees:", fees.tuition, "", ""],
        ["Hostel Fees:", fees.hostel, "", ""],
        ["Total Fees:", fees.total, "", ""],
        ["Scholarship Amount:", fees.scholarship, "", ""],
        ["Paid Amount:", fees.paid, "", ""],
        ["Balance Amount:", fees.balance, "", ""],
    ]
    builder.grid(breakdown)

    builder.section("FINANCIAL SUMMARY:", size=12)
    builder.rows([
        ("Last Payment Date:", _date(student.financial_info.last_payment_date)),
        ("Payment Method:", "Online/Offline"),
        ("Receipt Required:", "Yes"),
        ("Late Fee Policy:", "Rs. 500 per week after due date"),
    ], size=10, step=20)

    builder.section("PAYMENT INSTRUCTIONS:", size=12)
    builder.lines(PAYMENT_INSTRUCTIONS)
    return builder.build(_footer(now))


def _render(kind: str, build, record, now: Optional[datetime]) -> RenderedDocument:
    student = _snapshot(record)
    layout = build(student, now)
    return RenderedDocument(content=render_pdf(layout), filename=f"{kind}-{student.student_id}.pdf")


def render_hall_ticket(record, now: Optional[datetime] = None) -> RenderedDocument:
    return _render("hall-ticket", build_hall_ticket_layout, record, now)


def render_result(record, now: Optional[datetime] = None) -> RenderedDocument:
    return _render("result", build_result_layout, record, now)


def render_fee_structure(record, now: Optional[datetime] = None) -> RenderedDocument:
    return _render("fee-structure", build_fee_structure_layout, record, now)
