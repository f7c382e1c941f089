"""Provider repository - Lookup of bookable businesses"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Provider


class ProviderRepository:
    """Repository for provider database operations"""

    @staticmethod
    def find_first_by_service_type(db: Session, service_type: str) -> Optional[Provider]:
        """First provider whose service type contains the term, case-insensitively"""
        term = service_type.strip()
        if not term:
            return None
        escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        return (
            db.query(Provider)
            .filter(Provider.service_type.ilike(f"%{escaped}%", escape="\\"))
            .order_by(Provider.id)
            .first()
        )

    @staticmethod
    def list_providers(db: Session) -> list[Provider]:
        return db.query(Provider).order_by(Provider.id).all()

    @staticmethod
    def create_providers(db: Session, providers: list[dict]) -> int:
        db.add_all([Provider(**data) for data in providers])
        db.commit()
        return len(providers)
