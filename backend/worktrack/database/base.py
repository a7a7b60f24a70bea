from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def enum_type(enum_cls) -> SAEnum:
    """Store a str enum by value and refuse anything outside it."""
    return SAEnum(
        enum_cls,
        native_enum=False,
        validate_strings=True,
        length=32,
        values_callable=lambda members: [m.value for m in members],
    )
