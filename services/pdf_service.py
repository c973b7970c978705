import base64
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence

from fastapi.concurrency import run_in_threadpool
from jinja2 import Environment, FileSystemLoader, select_autoescape

from config.settings import settings
from schemas.progress import ProgressEntry
from schemas.reports import StudentReportRequest, TeachingPlanReportRequest
from schemas.students import Student
from schemas.teaching_plans import TeachingPlan
from services.pdf.composer import SchoolInfo, compose_student_report, compose_teaching_plan_report
from services.pdf.document import (
    BODY_TOP, FOOTER_TOP, MARGIN_LEFT, CONTENT_WIDTH, PAGE_HEIGHT, PAGE_WIDTH, PHOTO_COLUMN, PHOTO_SIZE,
    ReportDocument, STYLES, TABLE_HEADER_HEIGHT, TABLE_ROW_HEIGHT,
)
from services.photo_fetcher import FetchBinary, prefetch_photos
from services.report_errors import ReportCompositionError

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


def _data_uri(photo) -> str:
    """Photo → <img src>에 넣을 data URI"""
    return f"data:{photo.mime_type};base64,{base64.b64encode(photo.data).decode('ascii')}"


class PDFService:
    def __init__(self, template_dir: Optional[Path] = None, school: Optional[SchoolInfo] = None,
                 footer_line: Optional[str] = None, fetch_binary: Optional[FetchBinary] = None):
        # 템플릿 환경 설정 (사용자 입력 텍스트가 들어가므로 autoescape)
        self.env = Environment(
            loader=FileSystemLoader(template_dir or TEMPLATE_DIR),
            autoescape=select_autoescape(["html"]),
        )
        self.env.filters["data_uri"] = _data_uri
        self.school = school or SchoolInfo.from_settings()
        self.footer_line = footer_line or settings.footer_line
        self.fetch_binary = fetch_binary

    def _render_template(self, template_name: str, data: Dict[str, Any]) -> str:
        """템플릿을 렌더링하여 HTML 생성"""
        template = self.env.get_template(template_name)
        return template.render(**data)

    def _html_to_pdf(self, html_content: str) -> bytes:
        """HTML을 PDF로 변환"""
        # WeasyPrint는 import 시점에 Pango 네이티브 라이브러리를 로드하므로 실제 변환 때만 불러온다
        import weasyprint
        return weasyprint.HTML(string=html_content).write_pdf()

    def render_html(self, doc: ReportDocument) -> str:
        """FINALIZING 상태 문서 → HTML"""
        return self._render_template("report.html", {
            "title": doc.title,
            "pages": doc.pages,
            "styles": STYLES,
            "layout": {
                "page_width": PAGE_WIDTH,
                "page_height": PAGE_HEIGHT,
                "margin_left": MARGIN_LEFT,
                "content_width": CONTENT_WIDTH,
                "body_top": BODY_TOP,
                "footer_top": FOOTER_TOP,
                "photo_size": PHOTO_SIZE,
                "photo_column": PHOTO_COLUMN,
                "table_header_height": TABLE_HEADER_HEIGHT,
                "table_row_height": TABLE_ROW_HEIGHT,
            },
        })

    def render(self, doc: ReportDocument) -> bytes:
        """페이지 번호 부여 → HTML → PDF 변환 후 문서를 닫고 완성된 바이트 반환"""
        doc.finalize(self.footer_line)
        html = self.render_html(doc)
        try:
            pdf = self._html_to_pdf(html)
        except Exception as e:
            raise ReportCompositionError(f"PDF 변환 실패: {e}") from e
        doc.close()
        logger.info(f"PDF 생성 완료: {doc.title} ({doc.page_count} pages, {len(pdf)} bytes)")
        return pdf

    async def generate_student_report(self, students: Sequence[Student],
                                      progress_by_student: Mapping[int, Sequence[ProgressEntry]],
                                      options: StudentReportRequest,
                                      teacher_names: Optional[Dict[int, str]] = None) -> bytes:
        """학생 진도 보고서 PDF 생성 (사진 포함 요청 시 먼저 일괄 다운로드)"""
        photos = {}
        if options.include_photos:
            photos = await prefetch_photos(students, self.fetch_binary)

        doc = compose_student_report(
            students, progress_by_student, photos,
            class_name=options.class_name,
            start_date=options.start_date,
            end_date=options.end_date,
            teacher_names=teacher_names,
            school=self.school,
        )
        return await run_in_threadpool(self.render, doc)

    def generate_teaching_plan_report(self, plans: Sequence[TeachingPlan],
                                      teacher_names: Mapping[int, str],
                                      options: TeachingPlanReportRequest) -> bytes:
        """교육 계획 보고서 PDF 생성"""
        doc = compose_teaching_plan_report(
            plans, teacher_names,
            plan_type=options.type,
            class_name=options.class_name,
            start_date=options.start_date,
            end_date=options.end_date,
            school=self.school,
        )
        return self.render(doc)
