from datetime import date

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response
from sqlalchemy.orm import Session

from database.db import get_db
from schemas.reports import StudentReportRequest, TeachingPlanReportRequest
from services.pdf_service import PDFService
from services.report_data import SqlReportDataSource, collect_plan_report, collect_student_report

# 보고서 오류(ReportError)는 middlewares/error_handler.py에서 공통 응답으로 변환
router = APIRouter(prefix="/pdf", tags=["PDF 생성"])

pdf_service = PDFService()


def get_pdf_service() -> PDFService:
    return pdf_service


def _pdf_response(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# ✅ [PDF] 학생 진도 보고서 생성 (사진 다운로드는 비동기, DB 조회/렌더링은 스레드풀)
@router.post("/student-report")
async def generate_student_report_pdf(request: StudentReportRequest,
                                      db: Session = Depends(get_db),
                                      service: PDFService = Depends(get_pdf_service)):
    data = await run_in_threadpool(collect_student_report, SqlReportDataSource(db), request)
    pdf_content = await service.generate_student_report(
        data.students, data.progress_by_student, request, teacher_names=data.teacher_names
    )

    class_part = request.class_name.value if request.class_name else "all"
    return _pdf_response(pdf_content, f"student-progress-{class_part}-{date.today().isoformat()}.pdf")


# ✅ [PDF] 교육 계획 보고서 생성
@router.post("/teaching-plan-report")
def generate_teaching_plan_report_pdf(request: TeachingPlanReportRequest,
                                      db: Session = Depends(get_db),
                                      service: PDFService = Depends(get_pdf_service)):
    data = collect_plan_report(SqlReportDataSource(db), request)
    pdf_content = service.generate_teaching_plan_report(data.plans, data.teacher_names, request)

    type_part = request.type.value.lower() if request.type else "all"
    return _pdf_response(pdf_content, f"teaching-plans-{type_part}-{date.today().isoformat()}.pdf")
