from sqlalchemy import Column, Date, DateTime, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class TaskModel(Base):
    __tablename__ = "tasks"

    id = Column(String(32), primary_key=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    priority = Column(String(16), nullable=False, default="medium")
    status = Column(String(16), nullable=False, default="todo")
    due_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)


tasks_table = TaskModel.__table__
