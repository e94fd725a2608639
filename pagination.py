import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Union

from fastapi import Query
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Query as OrmQuery

from errors import ValidationFailed

# keeps offset = pageNo * pageSize inside a 64-bit SQL integer
MAX_PAGE_NO = 1_000_000
MAX_PAGE_SIZE = 1000


@dataclass(frozen=True)
class PageParams:
    page_no: int = 0
    page_size: int = 10
    sort_by: str = "id"
    sort_dir: str = "asc"

    @property
    def paginated(self) -> bool:
        # pageSize <= 0 asks for the whole list
        return self.page_size > 0

    @property
    def ascending(self) -> bool:
        return self.sort_dir.lower() == "asc"


def page_params(default_sort: str, default_dir: str):
    """Build a dependency reading pageNo/pageSize/sortBy/sortDir with per-resource defaults."""

    def dependency(
        page_no: int = Query(0, alias="pageNo", ge=0, le=MAX_PAGE_NO),
        page_size: int = Query(10, alias="pageSize", le=MAX_PAGE_SIZE),
        sort_by: str = Query(default_sort, alias="sortBy"),
        sort_dir: str = Query(default_dir, alias="sortDir"),
    ) -> PageParams:
        return PageParams(page_no=page_no, page_size=page_size, sort_by=sort_by, sort_dir=sort_dir)

    return dependency


def resolve_sort_column(model, sortable: Iterable[str], sort_by: str):
    for attr in sortable:
        if sort_by in (attr, to_camel(attr)):
            return getattr(model, attr)
    allowed = ", ".join(to_camel(a) for a in sortable)
    raise ValidationFailed(f"Cannot sort by '{sort_by}'; allowed fields: {allowed}")


def fetch(query: OrmQuery, model, sortable: Iterable[str], params: PageParams) -> Union[List[Any], Dict[str, Any]]:
    """Sort the query and return either the full list or one page with its metadata."""
    column = resolve_sort_column(model, sortable, params.sort_by)
    if params.ascending:
        query = query.order_by(column.asc(), model.id.asc())
    else:
        query = query.order_by(column.desc(), model.id.desc())

    if not params.paginated:
        return query.all()

    total = query.order_by(None).count()
    content = query.offset(params.page_no * params.page_size).limit(params.page_size).all()
    total_pages = math.ceil(total / params.page_size)
    return {
        "content": content,
        "page_no": params.page_no,
        "page_size": params.page_size,
        "total_elements": total,
        "total_pages": total_pages,
        "last": params.page_no + 1 >= total_pages,
    }
