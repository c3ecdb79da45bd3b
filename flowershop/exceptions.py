"""
도메인 예외 정의
"""


class FlowershopError(Exception):
    """모든 도메인 예외의 기반 클래스"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FlowershopError):
    """입력값이 사전 조건을 만족하지 않음 (I/O 이전에 거부)"""


class BackendUnavailableError(FlowershopError):
    """저장소 작업 실패 (연결, 권한, 용량 등)"""


class NotFoundError(FlowershopError):
    """요청한 문서가 존재하지 않음"""


def http_status_for(error: FlowershopError) -> int:
    """
    도메인 예외에 대응하는 HTTP 상태 코드

    사용 예:
        except FlowershopError as e:
            raise HTTPException(status_code=http_status_for(e), detail=e.message)
    """
    if isinstance(error, ValidationError):
        return 400
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, BackendUnavailableError):
        return 503
    return 500
