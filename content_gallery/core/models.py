from datetime import datetime
from sqlalchemy import String, Integer, BigInteger, Float, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column
from .db import Base

class ContentRecord(Base):
    __tablename__ = "content"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text)
    type: Mapped[str] = mapped_column(String(20), index=True)  # image | video
    # one record per local file; NULL for remote-only content
    local_file_path: Mapped[str | None] = mapped_column(Text, nullable=True, unique=True, index=True)
    mime_type: Mapped[str] = mapped_column(String(100), default="application/octet-stream")
    file_size: Mapped[int] = mapped_column(BigInteger, default=0)
    duration: Mapped[float | None] = mapped_column(Float, nullable=True)
    remote_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    remote_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

class Activity(Base):
    __tablename__ = "activity"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    ts: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)
    level: Mapped[str] = mapped_column(String(20), default="INFO")
    message: Mapped[str] = mapped_column(Text)
    payload_json: Mapped[str] = mapped_column(Text, default="{}")
