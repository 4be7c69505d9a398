from sqlalchemy import JSON, Column, String, Text

from app.db.base_class import Base


class Plan(Base):
    __tablename__ = "plans"

    # Logical owner reference only. Deleting a user leaves their plans behind.
    user_id = Column(String(36), index=True, nullable=False)
    plan = Column(Text, nullable=False)
    parameters = Column(JSON, nullable=False)
    user_info = Column(JSON, nullable=False)
