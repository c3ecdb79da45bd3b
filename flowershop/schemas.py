"""
Pydantic 모델 정의, API 요청/응답 검증용
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


# 사용자 관련
class LoginRequest(BaseModel):
    """로그인 요청"""
    email: str = Field(..., pattern=EMAIL_PATTERN, description="유효한 이메일을 입력해주세요.")
    password: str = Field(..., description="비밀번호")


class UserResponse(BaseModel):
    """사용자 응답 (users + employees 병합)"""
    email: str
    role: str
    franchise: str
    isActive: bool = True
    name: Optional[str] = None
    position: Optional[str] = None
    contact: Optional[str] = None


class LoginResponse(BaseModel):
    """로그인 응답"""
    success: bool
    message: str
    user: Optional[UserResponse] = None


class UserCreate(BaseModel):
    """사용자 생성 요청"""
    email: str = Field(..., pattern=EMAIL_PATTERN, description="유효한 이메일을 입력해주세요.")
    role: str = Field(..., min_length=1, description="권한을 선택해주세요.")
    franchise: str = Field(..., min_length=1, description="소속을 선택해주세요.")
    password: Optional[str] = Field(None, description="비밀번호 (비우면 기본 비밀번호)")
    name: str = Field(..., min_length=1, description="이름")
    position: str = Field(..., min_length=1, description="직위")
    contact: str = Field(..., min_length=1, description="연락처")


class UserUpdate(BaseModel):
    """사용자 수정 요청 (이메일은 변경 불가)"""
    role: str = Field(..., min_length=1, description="권한")
    franchise: str = Field(..., min_length=1, description="소속")
    name: str = Field(..., min_length=1, description="이름")
    position: str = Field(..., min_length=1, description="직위")
    contact: str = Field(..., min_length=1, description="연락처")


class PasswordUpdate(BaseModel):
    """비밀번호 변경 요청"""
    password: str = Field(..., min_length=1, description="새 비밀번호")


# 배송비 관련
class DeliveryFeeCreate(BaseModel):
    """지역 추가 요청 (검증은 레지스트리에서 수행)"""
    district: str = Field(..., description="지역명")
    fee: Any = Field(..., description="배송비")


class DeliveryFeeUpdate(BaseModel):
    """배송비 수정 요청"""
    fee: Any = Field(..., description="배송비")


class DeliveryFeeResponse(BaseModel):
    """배송비 응답"""
    id: str
    district: str
    fee: int
    fee_display: str
    is_duplicate: bool = False


class DuplicateGroupResponse(BaseModel):
    """중복 묶음 응답"""
    district: str
    count: int
    items: List[DeliveryFeeResponse]


class DeliveryFeeSummary(BaseModel):
    """배송비 통계"""
    total_districts: int
    average_fee: int
    duplicate_districts: int
    duplicate_items: int


class DeliveryFeeListResponse(BaseModel):
    """배송비 목록 응답"""
    items: List[DeliveryFeeResponse]
    duplicates: List[DuplicateGroupResponse]
    summary: DeliveryFeeSummary


class MergeDuplicatesResponse(BaseModel):
    """중복 정리 결과"""
    removed_ids: List[str]
    policy: str
    items: List[DeliveryFeeResponse]


# 자재 관련
class MaterialCreate(BaseModel):
    """자재 생성 요청"""
    name: str = Field(..., min_length=1, description="자재명을 입력해주세요.")
    mainCategory: str = Field(..., min_length=1, description="대분류를 선택해주세요.")
    midCategory: str = Field(..., min_length=1, description="중분류를 선택해주세요.")
    price: float = Field(..., ge=0, description="가격은 0 이상이어야 합니다.")
    supplier: str = Field(..., min_length=1, description="공급업체를 선택해주세요.")
    size: str = Field(..., min_length=1, description="규격을 입력해주세요.")
    color: str = Field(..., min_length=1, description="색상을 입력해주세요.")
    branch: str = Field(..., min_length=1, description="지점을 선택해주세요.")
    stock: int = Field(0, ge=0, description="재고는 0 이상이어야 합니다.")


class MaterialUpdate(BaseModel):
    """자재 수정 요청"""
    name: Optional[str] = Field(None, min_length=1)
    mainCategory: Optional[str] = Field(None, min_length=1)
    midCategory: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, ge=0)
    supplier: Optional[str] = Field(None, min_length=1)
    size: Optional[str] = Field(None, min_length=1)
    color: Optional[str] = Field(None, min_length=1)
    branch: Optional[str] = Field(None, min_length=1)
    stock: Optional[int] = Field(None, ge=0)


class MaterialResponse(MaterialCreate):
    """자재 응답"""
    id: str


# 고객 관련
class CustomerCreate(BaseModel):
    """고객 등록 요청"""
    name: str = Field(..., min_length=1, description="고객명을 입력해주세요.")
    contact: str = Field(..., min_length=1, description="연락처를 입력해주세요.")
    email: Optional[str] = None
    address: Optional[str] = None
    memo: Optional[str] = None


class CustomerUpdate(BaseModel):
    """고객 수정 요청 (입력한 항목만 변경)"""
    name: Optional[str] = Field(None, min_length=1)
    contact: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = None
    address: Optional[str] = None
    memo: Optional[str] = None


class CustomerResponse(CustomerCreate):
    """고객 응답"""
    id: str
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None


# 거래처 관련
class PartnerCreate(BaseModel):
    """거래처 등록 요청"""
    name: str = Field(..., min_length=1, description="거래처명을 입력해주세요.")
    type: str = Field(..., min_length=1, description="거래처 유형을 선택해주세요.")
    contact: str = ""
    contactPerson: str = ""
    email: str = ""
    address: str = ""
    branch: str = ""
    memo: str = ""


class PartnerUpdate(BaseModel):
    """거래처 수정 요청 (입력한 항목만 변경)"""
    name: Optional[str] = Field(None, min_length=1)
    type: Optional[str] = Field(None, min_length=1)
    contact: Optional[str] = None
    contactPerson: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    branch: Optional[str] = None
    memo: Optional[str] = None


class PartnerResponse(PartnerCreate):
    """거래처 응답"""
    id: str
    createdAt: Optional[str] = None


class PartnerBulkRequest(BaseModel):
    """거래처 일괄 등록 요청 (엑셀 시트의 행 목록)"""
    rows: List[Dict[str, Any]]


class PartnerBulkResponse(BaseModel):
    """거래처 일괄 등록 결과"""
    new_count: int
    duplicate_count: int
    skipped_count: int
    error_count: int
    items: List[PartnerResponse]


# 메시지 인쇄 관련
class LabelSheetResponse(BaseModel):
    """라벨지 규격"""
    id: str
    label: str
    cell_count: int
    column_count: int
    cell_height: str
    column_gap: str


class MessagePrintRequest(BaseModel):
    """메시지 인쇄 옵션"""
    labelType: str = Field(..., description="라벨지 종류")
    startPosition: int = Field(1, description="시작 위치")
    messageFont: Optional[str] = None
    messageFontSize: Optional[int] = None
    senderFont: Optional[str] = None
    senderFontSize: Optional[int] = None
    messageContent: Optional[str] = None
    senderName: Optional[str] = None


class MessagePrintResponse(BaseModel):
    """메시지 인쇄 결과"""
    payload: Dict[str, Any]
    preview: Dict[str, Any]


class MessageUpdate(BaseModel):
    """주문 메시지 수정"""
    messageContent: str = Field(..., description="메시지 내용")
    senderName: str = Field("", description="보내는 사람")
