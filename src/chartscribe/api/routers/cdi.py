"""
CDI improvement pass, review and record endpoints.
"""

from fastapi import APIRouter, Request

from ...application.dto.cdi_dto import EditCdiReviewRequest, UpdateCdiStatusRequest
from ...application.use_cases.cdi_review import (
    CancelCdiReviewUseCase,
    ConfirmCdiReviewUseCase,
    EditCdiReviewUseCase,
    GenerateCdiReviewUseCase,
    GetCdiRecordUseCase,
    GetCdiReportUseCase,
    UpdateCdiStatusUseCase,
)
from ..deps import (
    AppointmentRepositoryDep,
    CdiRepositoryDep,
    CdiServiceDep,
    ChartRepositoryDep,
    PatientRepositoryDep,
    ReviewRegistryDep,
)
from ..schemas.cdi import (
    CdiRecordSchema,
    CdiReportSchema,
    CdiReviewSchema,
    EditReviewRequest,
    UpdateStatusRequest,
)
from ..schemas.common import ApiResponse
from ..utils.responses import ok

router = APIRouter(prefix="/cdi", tags=["cdi"])


@router.post("/{appointment_id}/process", response_model=ApiResponse[CdiReviewSchema])
async def process_cdi(
    request: Request,
    appointment_id: str,
    chart_repo: ChartRepositoryDep,
    appointment_repo: AppointmentRepositoryDep,
    cdi_service: CdiServiceDep,
    reviews: ReviewRegistryDep,
):
    """Run the improvement pass on the saved chart and open a review."""
    session = await GenerateCdiReviewUseCase(
        chart_repo, appointment_repo, cdi_service, reviews
    ).execute(appointment_id)
    return ok(request, data=CdiReviewSchema.from_domain(session), message=session.summary())


@router.patch("/{appointment_id}/review", response_model=ApiResponse[CdiReviewSchema])
async def edit_review(
    request: Request, appointment_id: str, body: EditReviewRequest, reviews: ReviewRegistryDep
):
    session = await EditCdiReviewUseCase(reviews).execute(
        EditCdiReviewRequest(
            appointment_id=appointment_id, fields=body.fields, cdi_notes=body.cdi_notes
        )
    )
    return ok(request, data=CdiReviewSchema.from_domain(session))


@router.post("/{appointment_id}/review/confirm", response_model=ApiResponse[CdiRecordSchema])
async def confirm_review(
    request: Request, appointment_id: str, cdi_repo: CdiRepositoryDep, reviews: ReviewRegistryDep
):
    record = await ConfirmCdiReviewUseCase(cdi_repo, reviews).execute(appointment_id)
    return ok(request, data=CdiRecordSchema.from_domain(record), message="CDI record saved")


@router.delete("/{appointment_id}/review", response_model=ApiResponse[dict])
async def cancel_review(request: Request, appointment_id: str, reviews: ReviewRegistryDep):
    await CancelCdiReviewUseCase(reviews).execute(appointment_id)
    return ok(request, data={"appointment_id": appointment_id, "cancelled": True}, message="Review discarded")


@router.get("/{appointment_id}", response_model=ApiResponse[CdiRecordSchema])
async def get_cdi_record(request: Request, appointment_id: str, cdi_repo: CdiRepositoryDep):
    record = await GetCdiRecordUseCase(cdi_repo).execute(appointment_id)
    return ok(request, data=CdiRecordSchema.from_domain(record))


@router.put("/{appointment_id}/status", response_model=ApiResponse[CdiRecordSchema])
async def update_cdi_status(
    request: Request, appointment_id: str, body: UpdateStatusRequest, cdi_repo: CdiRepositoryDep
):
    record = await UpdateCdiStatusUseCase(cdi_repo).execute(
        UpdateCdiStatusRequest(
            appointment_id=appointment_id, status=body.status, reviewed_by=body.reviewed_by
        )
    )
    return ok(request, data=CdiRecordSchema.from_domain(record), message="Status updated")


@router.get("/{appointment_id}/report", response_model=ApiResponse[CdiReportSchema])
async def get_cdi_report(
    request: Request,
    appointment_id: str,
    chart_repo: ChartRepositoryDep,
    cdi_repo: CdiRepositoryDep,
    appointment_repo: AppointmentRepositoryDep,
    patient_repo: PatientRepositoryDep,
):
    """Fields for the CDI report, CDI values taking precedence."""
    fields = await GetCdiReportUseCase(
        chart_repo, cdi_repo, appointment_repo, patient_repo
    ).execute(appointment_id)
    return ok(request, data=CdiReportSchema(fields=fields))
