# calendar_optimizer/init_db.py
"""Create the booking, client and suggestion tables."""

import logging
from typing import Optional

from sqlalchemy.engine import Engine

from . import models  # noqa: F401
from .database import Base, engine

logger = logging.getLogger(__name__)


def init_db(bind: Optional[Engine] = None) -> None:
    target = bind or engine
    logger.info(f"Creating tables on {target.url.render_as_string(hide_password=True)}")
    Base.metadata.create_all(bind=target)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
