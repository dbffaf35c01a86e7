from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from coursehub.db.base_class import Base
from coursehub.services.grading import Graded, Grading, Ungraded

class Submission(Base):
    __tablename__ = "submissions"

    id = Column(Integer, primary_key=True, index=True)

    assignment_id = Column(Integer, ForeignKey("assignments.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    file_url = Column(String(512), nullable=False)
    file_name = Column(String(255), nullable=False)

    submitted_at = Column(DateTime(timezone=True), nullable=False)
    # frozen at creation time
    is_late = Column(Boolean, nullable=False, default=False)

    # Grading fields (all null until graded), read through `grading`
    grade = Column(Float, nullable=True)
    feedback = Column(Text, nullable=True)
    graded_at = Column(DateTime(timezone=True), nullable=True)
    graded_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    __table_args__ = (
        UniqueConstraint("assignment_id", "student_id", name="uq_submission_assignment_student"),
    )

    assignment = relationship("Assignment", back_populates="submissions")
    student = relationship("User", back_populates="submissions", foreign_keys=[student_id])
    graded_by = relationship("User", foreign_keys=[graded_by_id])

    @property
    def grading(self) -> Grading:
        if self.grade is None:
            return Ungraded()
        return Graded(
            grade=self.grade,
            feedback=self.feedback or "",
            graded_at=self.graded_at,
            graded_by_id=self.graded_by_id,
        )

    @grading.setter
    def grading(self, value: Grading) -> None:
        if isinstance(value, Graded):
            self.grade = value.grade
            self.feedback = value.feedback
            self.graded_at = value.graded_at
            self.graded_by_id = value.graded_by_id
        else:
            self.grade = None
            self.feedback = None
            self.graded_at = None
            self.graded_by_id = None
