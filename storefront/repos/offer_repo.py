# storefront/repos/offer_repo.py
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from storefront.data.models.offer import OfferModel


class OfferRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_offer(self, offer_id: int) -> OfferModel | None:
        return self.db.get(OfferModel, offer_id)

    def list_offers(self) -> list[OfferModel]:
        return list(self.db.execute(select(OfferModel).order_by(OfferModel.id)).scalars().all())

    def add_offer(self, offer: OfferModel) -> OfferModel:
        self.db.add(offer)
        self.db.flush()
        return offer

    def expire_offers(self, now: datetime) -> int:
        result = self.db.execute(
            update(OfferModel)
            .where(OfferModel.status == "active", OfferModel.valid_until < now)
            .values(status="expired")
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
