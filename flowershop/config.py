"""
설정 파일
시스템의 주요 설정 상수를 정의
"""

import os
from pathlib import Path

# 프로젝트 루트 디렉터리
BASE_DIR = Path(__file__).parent.parent

# 로그 설정
LOG_DIR = Path(os.getenv("FLOWERSHOP_LOG_DIR", BASE_DIR / "logs"))
LOG_LEVEL = os.getenv("FLOWERSHOP_LOG_LEVEL", "INFO")

# 데이터베이스 설정
DATABASE_URL = os.getenv("FLOWERSHOP_DATABASE_URL", "sqlite:///./flowershop.db")

# Session 설정
SESSION_SECRET_KEY = os.getenv("SESSION_SECRET_KEY", "your-secret-key-change-in-production")
SESSION_COOKIE_NAME = "flowershop_session"
SESSION_MAX_AGE = 86400  # 24시간

# 사용자 권한
ROLE_ADMIN = "관리자"
ROLE_STAFF = "직원"

# userRoles 컬렉션에 기록되는 권한 코드
ROLE_CODES = {
    ROLE_ADMIN: "manager",
    ROLE_STAFF: "user",
}

# 신규 사용자 기본 비밀번호
DEFAULT_PASSWORD = os.getenv("FLOWERSHOP_DEFAULT_PASSWORD", "123456")
DEFAULT_DEPARTMENT = "일반"

# 컬렉션 이름
COLLECTION_DELIVERY_FEES = "deliveryFees"
COLLECTION_MATERIALS = "materials"
COLLECTION_ORDERS = "orders"
COLLECTION_CUSTOMERS = "customers"
COLLECTION_PARTNERS = "partners"
COLLECTION_USERS = "users"
COLLECTION_EMPLOYEES = "employees"
COLLECTION_USER_ROLES = "userRoles"
COLLECTION_SYSTEM = "system"
SETTINGS_DOC_ID = "settings"

# 메시지 카드
MESSAGE_SEPARATOR = "\n---\n"
DEFAULT_MESSAGE_FONT_SIZE = 14
DEFAULT_SENDER_FONT_SIZE = 12
FALLBACK_FONTS = [
    "Noto Sans KR",
    "Malgun Gothic",
    "Nanum Gothic",
    "Arial",
    "Helvetica",
    "Times New Roman",
]

# 중복 지역 정리 시 기본 유지 정책
DEFAULT_RETENTION_POLICY = "keep_first"

# 중복 지역 추가 거부 여부 (기본: 허용 후 정리)
REJECT_DUPLICATE_DISTRICT = os.getenv("FLOWERSHOP_REJECT_DUPLICATE_DISTRICT", "0") == "1"
