from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from forum.db.session import get_db
from forum.models.category import Category
from forum.models.user import User
from forum.schemas.category_schema import CategoryCreate, CategoryUpdate, CategoryResponse
from forum.services.auth import require_admin
from forum.services import categories as category_service

router = APIRouter(prefix="/categories", tags=["categories"])


def _payload(category: Category) -> dict:
    return {"success": True, "data": CategoryResponse.model_validate(category)}


@router.get("/")
async def get_categories(db: Session = Depends(get_db)):
    categories = db.query(Category).order_by(Category.name).all()
    return {
        "success": True,
        "count": len(categories),
        "data": [CategoryResponse.model_validate(c) for c in categories],
    }


@router.get("/id/{category_id}")
async def get_category_by_id(category_id: int, db: Session = Depends(get_db)):
    return _payload(category_service.get_category(db, category_id=category_id))


@router.get("/slug/{slug}")
async def get_category_by_slug(slug: str, db: Session = Depends(get_db)):
    return _payload(category_service.get_category(db, slug=slug))


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_category(data: CategoryCreate, db: Session = Depends(get_db),
                          admin: User = Depends(require_admin)):
    return _payload(category_service.create_category(db, data))


@router.put("/{category_id}")
async def update_category(category_id: int, data: CategoryUpdate, db: Session = Depends(get_db),
                          admin: User = Depends(require_admin)):
    return _payload(category_service.update_category(db, category_id, data))


@router.delete("/{category_id}")
async def delete_category(category_id: int, db: Session = Depends(get_db),
                          admin: User = Depends(require_admin)):
    category_service.delete_category(db, category_id)
    return {"success": True, "data": {}}
