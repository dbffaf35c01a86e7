from sqlalchemy import CheckConstraint, Column, DateTime, Float, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from coursehub.db.base_class import Base

class Assignment(Base):
    __tablename__ = "assignments"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    due_at = Column(DateTime(timezone=True), nullable=False)
    max_points = Column(Float, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("max_points >= 0", name="ck_assignments_max_points_non_negative"),
    )

    course = relationship("Course", back_populates="assignments")
    created_by = relationship("User", foreign_keys=[created_by_id])

    submissions = relationship("Submission", back_populates="assignment", cascade="all, delete-orphan")
