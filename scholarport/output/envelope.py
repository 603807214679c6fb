"""Build export envelopes from tracked records and export options.

Every output format renders the same envelope, so option filtering and
anonymization happen here once.
"""

import logging
from datetime import date, datetime, timezone
from typing import Any, Iterable, List, Mapping, Optional, Union

from scholarport.models.envelope import (
    AcademicProfile,
    ApplicationData,
    ExportEnvelope,
    ExportMetadata,
    GoalExport,
    ScholarshipExport,
    StudentProfileExport,
)
from scholarport.models.options import ExportOptions, ExportType
from scholarport.models.records import (
    FinancialGoalRecord,
    ScholarshipRecord,
    StudentProfile,
)
from scholarport.output.anonymize import (
    class_standing,
    goal_category,
    gpa_range,
    major_category,
)
from scholarport.processing.analytics import calculate_financial_analytics
from scholarport.processing.eligibility import (
    assess_difficulty,
    check_eligibility,
    recommend_for,
)
from scholarport.processing.normalizer import FieldNormalizer, RawRecord

logger = logging.getLogger(__name__)

ANONYMOUS_EXPORTER = "Anonymous User"


def _coerce_profile(
    profile: Union[StudentProfile, Mapping[str, Any], None],
) -> StudentProfile:
    if profile is None:
        return StudentProfile()
    if isinstance(profile, StudentProfile):
        return profile
    return StudentProfile.model_validate(profile)


def _coerce_goals(
    goals: Optional[Iterable[Union[FinancialGoalRecord, RawRecord]]],
    normalizer: FieldNormalizer,
) -> List[FinancialGoalRecord]:
    if not goals:
        return []
    return [
        goal if isinstance(goal, FinancialGoalRecord) else normalizer.normalize_goal(goal)
        for goal in goals
    ]


def project_scholarship(
    scholarship: ScholarshipRecord,
    options: ExportOptions,
    profile: Optional[StudentProfile] = None,
    export_type: ExportType = ExportType.TEMPLATE,
) -> ScholarshipExport:
    """Project one record into its exported form, honoring the options."""
    exported = ScholarshipExport(
        id=scholarship.id,
        name=scholarship.name,
        organization=scholarship.organization,
        application_url=scholarship.application_url,
        amount=scholarship.amount,
        deadline=scholarship.deadline,
        description=scholarship.description,
        requirements=list(scholarship.requirements),
    )

    if options.include_eligibility_criteria:
        exported.eligibility_met = check_eligibility(scholarship, profile)

    if options.include_application_progress:
        exported.application_status = scholarship.status
        exported.submission_date = scholarship.submission_date
        exported.follow_up_date = scholarship.follow_up_date

    if options.include_personal_responses and not options.anonymize_data:
        exported.application_data = ApplicationData(
            essays=scholarship.essays,
            documents=scholarship.documents,
            personal_notes=scholarship.notes,
        )

    if export_type == ExportType.TEMPLATE:
        exported.difficulty_level = assess_difficulty(scholarship)
        exported.recommended_for = recommend_for(scholarship)

    return exported


def project_profile(
    profile: StudentProfile,
    options: ExportOptions,
    exported_at: datetime,
) -> StudentProfileExport:
    if options.anonymize_data:
        return StudentProfileExport(
            academic_profile=AcademicProfile(
                gpa_range=gpa_range(profile.gpa),
                major_category=major_category(profile.major),
                class_standing=class_standing(profile.graduation_year, exported_at.date()),
            )
        )
    return StudentProfileExport(**profile.model_dump())


def project_goal(goal: FinancialGoalRecord, options: ExportOptions) -> GoalExport:
    if options.anonymize_data:
        return GoalExport(
            id=goal.id,
            title=goal.title,
            deadline=goal.deadline,
            calculation_method=goal.calculation_method,
            goal_category=goal_category(goal.target_amount),
        )
    return GoalExport(
        id=goal.id,
        title=goal.title,
        target_amount=goal.target_amount,
        current_amount=goal.current_amount,
        deadline=goal.deadline,
        calculation_method=goal.calculation_method,
    )


def build_envelope(
    scholarships: Iterable[RawRecord],
    student_profile: Union[StudentProfile, Mapping[str, Any], None] = None,
    financial_goals: Optional[Iterable[Union[FinancialGoalRecord, RawRecord]]] = None,
    options: Optional[ExportOptions] = None,
    export_type: ExportType = ExportType.TEMPLATE,
    exported_at: Optional[datetime] = None,
) -> ExportEnvelope:
    """Assemble the export envelope for a portfolio.

    Args:
        scholarships: Tracked scholarships (records or aliased mappings)
        student_profile: Profile of the exporting student
        financial_goals: Funding goals
        options: Export options, defaults when omitted
        export_type: full-backup, template or portfolio
        exported_at: Export timestamp, now (UTC) when omitted

    Returns:
        ExportEnvelope ready for any encoder
    """
    options = options or ExportOptions()
    export_type = ExportType(export_type)
    exported_at = exported_at or datetime.now(timezone.utc)

    normalizer = FieldNormalizer()
    records = [
        s if isinstance(s, ScholarshipRecord) and s.name else normalizer.normalize_scholarship(s)
        for s in scholarships
    ]
    goals = _coerce_goals(financial_goals, normalizer)
    profile = _coerce_profile(student_profile)

    analytics = calculate_financial_analytics(records, goals)

    if options.anonymize_data:
        exported_by = ANONYMOUS_EXPORTER
    else:
        exported_by = profile.display_name

    envelope = ExportEnvelope(
        export_type=export_type,
        export_date=exported_at.isoformat(),
        exported_by=exported_by,
        scholarships=[project_scholarship(s, options, profile, export_type) for s in records],
        metadata=ExportMetadata(
            total_scholarships=len(records),
            completed_applications=analytics.status_breakdown.awarded,
            pending_applications=analytics.status_breakdown.pending,
            total_potential_funding=sum(s.amount or 0 for s in records),
            export_settings=options,
            financial_analytics=analytics,
        ),
    )

    if export_type == ExportType.FULL_BACKUP or options.include_personal_responses:
        envelope.student_profile = project_profile(profile, options, exported_at)

    if options.include_financial_info and goals:
        envelope.financial_goals = [project_goal(goal, options) for goal in goals]

    logger.info(
        f"Built {export_type.value} envelope with {len(records)} scholarships "
        f"and {len(envelope.financial_goals or [])} goals"
    )
    return envelope


def _stricter(settings: ExportOptions, options: ExportOptions) -> ExportOptions:
    return ExportOptions(
        include_personal_responses=settings.include_personal_responses and options.include_personal_responses,
        include_eligibility_criteria=settings.include_eligibility_criteria and options.include_eligibility_criteria,
        include_application_progress=settings.include_application_progress and options.include_application_progress,
        include_financial_info=settings.include_financial_info and options.include_financial_info,
        anonymize_data=settings.anonymize_data or options.anonymize_data,
    )


def _export_day(export_date: str) -> date:
    try:
        return datetime.fromisoformat(export_date.replace("Z", "+00:00")).date()
    except ValueError:
        return date.today()


def _bucket_goal(goal: GoalExport) -> GoalExport:
    return goal.model_copy(
        update={
            "target_amount": None,
            "current_amount": None,
            "goal_category": goal_category(goal.target_amount),
        }
    )


def narrow_envelope(envelope: ExportEnvelope, options: ExportOptions) -> ExportEnvelope:
    """Withhold envelope content according to a second set of export options.

    Content left out when the envelope was built cannot come back, so each
    switch takes the stricter of the envelope's export settings and
    ``options``. The returned envelope records the switches it was narrowed to.

    Args:
        envelope: Envelope built by ``build_envelope``
        options: Export options requested at serialization time

    Returns:
        A new envelope, or the same one when nothing changes
    """
    settings = envelope.metadata.export_settings
    effective = _stricter(settings, options)
    if effective == settings:
        return envelope

    scholarships = []
    for scholarship in envelope.scholarships:
        update: dict = {}
        if not effective.include_eligibility_criteria:
            update["eligibility_met"] = None
        if not effective.include_application_progress:
            update["application_status"] = None
            update["submission_date"] = None
            update["follow_up_date"] = None
        if not effective.include_personal_responses or effective.anonymize_data:
            update["application_data"] = None
        scholarships.append(scholarship.model_copy(update=update))

    profile = envelope.student_profile
    if profile is not None:
        if envelope.export_type != ExportType.FULL_BACKUP and not effective.include_personal_responses:
            profile = None
        elif effective.anonymize_data and profile.academic_profile is None:
            profile = StudentProfileExport(
                academic_profile=AcademicProfile(
                    gpa_range=gpa_range(profile.gpa),
                    major_category=major_category(profile.major),
                    class_standing=class_standing(profile.graduation_year, _export_day(envelope.export_date)),
                )
            )

    goals = envelope.financial_goals
    if goals is not None:
        if not effective.include_financial_info:
            goals = None
        elif effective.anonymize_data:
            goals = [goal if goal.goal_category else _bucket_goal(goal) for goal in goals]

    logger.debug(f"Narrowed {envelope.export_type.value} envelope to {effective.to_wire()}")
    return envelope.model_copy(
        update={
            "exported_by": ANONYMOUS_EXPORTER if effective.anonymize_data else envelope.exported_by,
            "scholarships": scholarships,
            "student_profile": profile,
            "financial_goals": goals,
            "metadata": envelope.metadata.model_copy(update={"export_settings": effective}),
        }
    )
