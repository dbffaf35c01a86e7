from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from coursehub.db.base_class import Base


class Material(Base):
    __tablename__ = "materials"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    uploaded_by_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)

    file_url = Column(String(512), nullable=False)
    file_type = Column(String(255), nullable=False)
    file_name = Column(String(255), nullable=False)

    tags = Column(JSON, nullable=False, default=list)

    uploaded_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    course = relationship("Course", back_populates="materials")
    uploaded_by = relationship("User", foreign_keys=[uploaded_by_id])
