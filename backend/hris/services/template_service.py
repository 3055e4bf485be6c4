import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hris.core.exceptions import BusinessRuleError, NotFoundError
from hris.models.template import TEMPLATE_CATEGORIES, Template
from hris.models.user import User
from hris.services.pagination import PageParams, apply_updates, paginate

logger = logging.getLogger("hris.templates")

SORTABLE_FIELDS = {
    "name": Template.name,
    "created_at": Template.created_at,
    "updated_at": Template.updated_at,
    "download_count": Template.download_count,
    "category": Template.category,
}


class TemplateService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, template_id: int) -> Template:
        template = await self.db.get(Template, template_id, populate_existing=True)
        if template is None:
            raise NotFoundError(f"Template {template_id} not found")
        return template

    async def list(
        self,
        params: PageParams,
        company_id: Optional[int] = None,
        category: Optional[str] = None,
        file_type: Optional[str] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> Tuple[List[Template], int]:
        query = select(Template)
        if company_id is not None:
            query = query.where(Template.company_id == company_id)
        if category:
            query = query.where(Template.category == category)
        if file_type:
            query = query.where(Template.file_type == file_type)
        if is_active is not None:
            query = query.where(Template.is_active == is_active)
        if search:
            pattern = f"%{search}%"
            query = query.where(or_(Template.name.ilike(pattern), Template.description.ilike(pattern)))

        column = SORTABLE_FIELDS.get(sort_by)
        if column is None:
            raise BusinessRuleError(
                f"Cannot sort by '{sort_by}'. Use one of: {', '.join(SORTABLE_FIELDS)}",
                code="INVALID_SORT",
            )
        ordering = column.asc() if sort_order.lower() == "asc" else column.desc()
        return await paginate(self.db, query.order_by(ordering, Template.id.desc()), params)

    async def by_company(self, company_id: int) -> List[Template]:
        result = await self.db.execute(
            select(Template)
            .where(Template.company_id == company_id, Template.is_active.is_(True))
            .order_by(Template.name)
        )
        return list(result.scalars().all())

    async def by_category(self, category: str, company_id: Optional[int] = None) -> List[Template]:
        if category not in TEMPLATE_CATEGORIES:
            raise BusinessRuleError(f"Unknown template category '{category}'", code="INVALID_CATEGORY")
        query = select(Template).where(Template.category == category, Template.is_active.is_(True))
        if company_id is not None:
            query = query.where(Template.company_id == company_id)
        result = await self.db.execute(query.order_by(Template.name))
        return list(result.scalars().all())

    async def statistics(self, company_id: Optional[int] = None) -> Dict:
        scope = []
        if company_id is not None:
            scope.append(Template.company_id == company_id)

        totals = await self.db.execute(
            select(
                func.count(Template.id),
                func.coalesce(func.sum(Template.download_count), 0),
            ).where(*scope)
        )
        total, downloads = totals.one()
        active = (
            await self.db.execute(select(func.count(Template.id)).where(Template.is_active.is_(True), *scope))
        ).scalar() or 0

        by_category = await self.db.execute(
            select(Template.category, func.count(Template.id)).where(*scope).group_by(Template.category)
        )
        by_file_type = await self.db.execute(
            select(Template.file_type, func.count(Template.id)).where(*scope).group_by(Template.file_type)
        )
        top = await self.db.execute(
            select(Template).where(*scope).order_by(Template.download_count.desc(), Template.id).limit(5)
        )
        return {
            "total_templates": total or 0,
            "active_templates": active,
            "total_downloads": int(downloads or 0),
            "by_category": dict(by_category.all()),
            "by_file_type": dict(by_file_type.all()),
            "most_downloaded": list(top.scalars().all()),
        }

    async def create(self, values: dict, actor: User) -> Template:
        template = Template(**values, created_by=actor.id, updated_by=actor.id, download_count=0)
        self.db.add(template)
        await self.db.commit()
        await self.db.refresh(template)
        logger.info(f"Template '{template.name}' created by {actor.email}")
        return template

    async def update(self, template_id: int, changes: dict, actor: User) -> Template:
        template = await self.get(template_id)
        apply_updates(template, changes)
        template.updated_by = actor.id
        await self.db.commit()
        await self.db.refresh(template)
        return template

    async def delete(self, template_id: int) -> None:
        template = await self.get(template_id)
        await self.db.delete(template)
        await self.db.commit()

    async def duplicate(self, template_id: int, actor: User) -> Template:
        source = await self.get(template_id)
        copy = Template(
            company_id=source.company_id,
            name=f"{source.name} (Copy)",
            description=source.description,
            category=source.category,
            file_type=source.file_type,
            file_path=source.file_path,
            file_name=source.file_name,
            file_size=source.file_size,
            mime_type=source.mime_type,
            version=source.version,
            is_active=source.is_active,
            download_count=0,
            created_by=actor.id,
            updated_by=actor.id,
        )
        self.db.add(copy)
        await self.db.commit()
        await self.db.refresh(copy)
        return copy

    async def track_download(self, template_id: int) -> Template:
        await self.get(template_id)
        # atomic increment
        await self.db.execute(
            update(Template)
            .where(Template.id == template_id)
            .values(download_count=Template.download_count + 1)
        )
        await self.db.commit()
        return await self.get(template_id)
