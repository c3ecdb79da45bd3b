"""
데이터베이스 초기화 스크립트
모든 테이블을 비우고 초기 관리자 계정과 기본 배송비 데이터를 생성
"""

from flowershop.auth import bootstrap_admin
from flowershop.database import create_store, engine, session_scope
from flowershop.delivery_fees import DistrictFeeRegistry
from flowershop.exceptions import FlowershopError
from flowershop.logger import get_logger
from flowershop.models import Base
from flowershop.settings import SettingsService

logger = get_logger("init_db")

DEFAULT_DISTRICT_FEES = [
    ("강남구", 15000),
    ("강동구", 18000),
    ("강북구", 15000),
    ("강서구", 20000),
    ("관악구", 15000),
    ("광진구", 15000),
    ("마포구", 15000),
    ("서초구", 15000),
    ("송파구", 15000),
    ("용산구", 15000),
    ("종로구", 10000),
    ("중구", 10000),
]


def recreate_tables():
    """모든 테이블 재생성"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    print("모든 테이블을 다시 생성했습니다")


def create_initial_data():
    """초기 데이터 생성 (관리자 계정, 시스템 설정, 기본 배송비)"""
    store = create_store()
    with session_scope() as db:
        try:
            bootstrap_admin(db, store, "admin@example.com", "admin123")
            print("기본 관리자 생성: admin@example.com / admin123")

            SettingsService(store).load()
            registry = DistrictFeeRegistry(store)
            for district, fee in DEFAULT_DISTRICT_FEES:
                registry.add_district(district, fee)
            print(f"기본 배송비 {len(DEFAULT_DISTRICT_FEES)}개 지역 생성")

            print("데이터베이스 초기화 완료!")
        except FlowershopError as e:
            db.rollback()
            logger.error(f"초기화 실패: {e.message}", exc_info=True)
            raise


if __name__ == "__main__":
    print("데이터베이스 초기화...")
    recreate_tables()
    create_initial_data()
