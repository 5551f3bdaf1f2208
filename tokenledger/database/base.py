# tokenledger/database/base.py

from datetime import datetime, timezone

import msgspec
from sqlalchemy import Column, DateTime, text
from sqlalchemy.orm import declarative_base, declarative_mixin


LedgerBase = declarative_base()


@declarative_mixin
class TimestampMixin:
    inserted_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text('CURRENT_TIMESTAMP')
    )

    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text('CURRENT_TIMESTAMP'),
        onupdate=lambda: datetime.now(timezone.utc)
    )


class DBBaseModel(LedgerBase, TimestampMixin):
    __abstract__ = True

    @classmethod
    def from_msgspec(cls, msgspec_obj: msgspec.Struct, **overrides):
        data = msgspec.structs.asdict(msgspec_obj)
        data.update(overrides)
        valid_columns = {col.name for col in cls.__table__.columns}
        filtered_data = {k: v for k, v in data.items() if k in valid_columns}

        return cls(**filtered_data)
