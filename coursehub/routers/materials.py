import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session

from coursehub.core.deps import get_db, get_storage
from coursehub.core.errors import InvalidInput
from coursehub.core.lookups import get_course, get_material
from coursehub.core.permissions import get_principal
from coursehub.models.material import Material
from coursehub.schemas.material import MaterialRead, MaterialUpdate
from coursehub.services import cascade
from coursehub.services.policy import Action, Principal, authorize
from coursehub.services.storage import FileStorage

logger = logging.getLogger(__name__)

router = APIRouter()


def _parse_tags(raw: str | None) -> list[str]:
    """Tags arrive as a JSON array inside a multipart form field."""
    if raw is None or not raw.strip():
        return []
    try:
        tags = json.loads(raw)
    except json.JSONDecodeError:
        raise InvalidInput("tags must be a JSON array of strings")
    if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
        raise InvalidInput("tags must be a JSON array of strings")
    return [t.strip() for t in tags if t.strip()]


@router.get("/courses/{course_id}/materials", response_model=list[MaterialRead])
def list_materials(
    course_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    course = get_course(db, course_id)
    authorize(principal, Action.MATERIAL_READ, course=course)

    return (
        db.query(Material)
        .filter(Material.course_id == course_id)
        .order_by(Material.uploaded_at.desc(), Material.id.desc())
        .all()
    )


@router.post(
    "/courses/{course_id}/materials",
    response_model=MaterialRead,
    status_code=status.HTTP_201_CREATED,
)
def upload_material(
    course_id: int,
    title: str = Form(..., min_length=1, max_length=255),
    description: str = Form(..., min_length=1),
    tags: Optional[str] = Form(None),
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: FileStorage = Depends(get_storage),
    principal: Principal = Depends(get_principal),
):
    course = get_course(db, course_id)
    authorize(principal, Action.MATERIAL_CREATE, course)
    parsed_tags = _parse_tags(tags)

    stored = storage.save(file)
    material = Material(
        course_id=course.id,
        uploaded_by_id=principal.id,
        title=title.strip(),
        description=description,
        file_url=stored.url,
        file_type=stored.content_type,
        file_name=stored.file_name,
        tags=parsed_tags,
    )
    db.add(material)
    try:
        db.commit()
    except Exception:
        db.rollback()
        storage.delete(stored.url)
        raise

    db.refresh(material)
    logger.info("material %s uploaded to %s", material.id, course.code)
    return material


@router.put("/materials/{material_id}", response_model=MaterialRead)
def update_material(
    material_id: int,
    payload: MaterialUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    material = get_material(db, material_id)
    authorize(principal, Action.MATERIAL_UPDATE, material, course=material.course)

    if payload.title is not None:
        material.title = payload.title.strip()
    if payload.description is not None:
        material.description = payload.description
    if payload.tags is not None:
        # reassign so the JSON column sees the change
        material.tags = [t.strip() for t in payload.tags if t.strip()]

    db.commit()
    db.refresh(material)
    return material


@router.delete("/materials/{material_id}")
def delete_material(
    material_id: int,
    db: Session = Depends(get_db),
    storage: FileStorage = Depends(get_storage),
    principal: Principal = Depends(get_principal),
):
    material = get_material(db, material_id)
    authorize(principal, Action.MATERIAL_DELETE, material, course=material.course)
    cascade.delete_material(db, storage, material)
    return {"message": "Material deleted successfully"}
