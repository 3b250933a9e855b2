# storefront/repos/coupon_repo.py
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from storefront.data.models.coupon import CouponModel


class CouponRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_coupon(self, coupon_id: int) -> CouponModel | None:
        return self.db.get(CouponModel, coupon_id)

    def get_by_code(self, code: str) -> CouponModel | None:
        #exact match, codes are case sensitive
        return self.db.execute(
            select(CouponModel).where(CouponModel.code == code)
        ).scalar_one_or_none()

    def list_coupons(self) -> list[CouponModel]:
        return list(self.db.execute(select(CouponModel).order_by(CouponModel.id)).scalars().all())

    def create_coupon(self, coupon: CouponModel) -> CouponModel:
        self.db.add(coupon)
        self.db.commit()
        self.db.refresh(coupon)
        return coupon

    def save(self, coupon: CouponModel) -> CouponModel:
        self.db.commit()
        self.db.refresh(coupon)
        return coupon

    def delete_coupon(self, coupon: CouponModel) -> None:
        self.db.delete(coupon)
        self.db.commit()

    def increment_usage(self, code: str) -> int:
        result = self.db.execute(
            update(CouponModel)
            .where(CouponModel.code == code)
            .values(times_used=CouponModel.times_used + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
