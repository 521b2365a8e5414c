"""
Waiter management service
"""

import logging
from typing import Dict, List, Optional
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, ValidationError
from app.services.repositories import WaiterRepo

logger = logging.getLogger(__name__)

class WaiterService:
    """Service for waiter records and the waiter summary shown on tables"""

    @staticmethod
    def summarize(waiter: Optional[Dict]) -> Optional[Dict]:
        """Reduce a waiter document to {_id, name, phoneNumber}"""
        if not waiter:
            return None
        return {
            "_id": waiter["_id"],
            "name": waiter.get("name"),
            "phoneNumber": waiter.get("phoneNumber"),
        }

    @staticmethod
    def waiter_summary(waiter_id: Optional[str], db: Optional[Session]) -> Optional[Dict]:
        """Resolve a waiter reference; None when unset or dangling"""
        if not waiter_id:
            return None
        waiter = WaiterRepo.get_by_id(db, waiter_id)
        if not waiter:
            logger.warning(f"Order references missing waiter {waiter_id}")
        return WaiterService.summarize(waiter)

    @staticmethod
    def list_waiters(db: Optional[Session]) -> List[Dict]:
        return WaiterRepo.list_all(db)

    @staticmethod
    def get_waiter(waiter_id: str, db: Optional[Session]) -> Dict:
        waiter = WaiterRepo.get_by_id(db, waiter_id)
        if not waiter:
            raise NotFoundError("Waiter")
        return waiter

    @staticmethod
    def create_waiter(name: Optional[str], phone_number: Optional[str], db: Optional[Session]) -> Dict:
        if not name:
            raise ValidationError("Waiter name is required")

        waiter = WaiterRepo.create(db, name, phone_number)
        logger.info(f"Created waiter {waiter['_id']} ({name})")
        return waiter

    @staticmethod
    def update_waiter(
        waiter_id: str,
        db: Optional[Session],
        name: Optional[str] = None,
        phone_number: Optional[str] = None
    ) -> Dict:
        if not name and phone_number is None:
            raise ValidationError("At least name or phone number must be provided")

        fields = {}
        if name:
            fields["name"] = name
        if phone_number is not None:
            fields["phoneNumber"] = phone_number

        waiter = WaiterRepo.update(db, waiter_id, fields)
        if not waiter:
            raise NotFoundError("Waiter")
        logger.info(f"Updated waiter {waiter_id}")
        return waiter

    @staticmethod
    def delete_waiter(waiter_id: str, db: Optional[Session]) -> None:
        if not WaiterRepo.delete(db, waiter_id):
            raise NotFoundError("Waiter")
        logger.info(f"Deleted waiter {waiter_id}")
