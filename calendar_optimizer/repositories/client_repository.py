# calendar_optimizer/repositories/client_repository.py
"""Client directory lookups."""

import logging
from typing import Dict, Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.client import ClientProfile
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ClientRepository(BaseRepository[ClientProfile]):
    def __init__(self, db: Session):
        super().__init__(db, ClientProfile)
        self.logger = logging.getLogger(__name__)

    def get_by_id(self, id: str):
        try:
            return self.db.query(ClientProfile).filter(ClientProfile.user_id == id).first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting client profile {id}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve client profile: {str(e)}")

    def get_display_names(self, client_ids: Iterable[str]) -> Dict[str, str]:
        """
        Resolve client ids to first names.

        Clients without a profile or a first name are left out of the result;
        callers apply their own placeholder.
        """
        ids = list(set(client_ids))
        if not ids:
            return {}

        try:
            profiles = (
                self.db.query(ClientProfile.user_id, ClientProfile.first_name)
                .filter(ClientProfile.user_id.in_(ids))
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error resolving client names: {str(e)}")
            raise RepositoryException(f"Failed to resolve client names: {str(e)}")

        return {user_id: first_name for user_id, first_name in profiles if first_name}
