"""보고서 생성 파이프라인에서 사용하는 예외 계층"""


class ReportError(Exception):
    """보고서 생성 실패의 공통 부모. code는 API 에러 응답에 그대로 실린다."""
    code = "REPORT_ERROR"


class ReportDataError(ReportError):
    """DB 조회 실패 (재시도 없이 한 번만 전파)"""
    code = "REPORT_DATA_ERROR"


class ReportCompositionError(ReportError):
    """레이아웃 구성 실패 (잘못된 날짜 등) - 문서 전체를 실패 처리"""
    code = "REPORT_COMPOSITION_ERROR"


class DocumentStateError(ReportCompositionError):
    """문서 수명주기(Created → Populating → Finalizing → Closed)에 맞지 않는 호출"""
    code = "DOCUMENT_STATE_ERROR"


class PhotoFetchError(ReportError):
    """사진 다운로드/형식 오류. 호출부에서 잡아 텍스트만 출력한다."""
    code = "PHOTO_FETCH_ERROR"
