# dealership/utils/pagination.py
"""
Постраничная выдача списков
"""

from typing import Callable, Dict, List, Any, Optional
from flask import request, url_for
from sqlalchemy.orm import Query

DEFAULT_PER_PAGE = 20
MAX_PER_PAGE = 100


class Pagination:
    """Одна страница результатов запроса"""

    def __init__(self, query: Query, page: int, per_page: int, max_per_page: int = MAX_PER_PAGE):
        self.page = max(1, page)
        self.per_page = min(max(1, per_page), max_per_page)

        # Сортировка не влияет на количество, count выполняется без нее
        self.total = query.order_by(None).count()
        self.total_pages = -(-self.total // self.per_page)

        self.items: List = query.offset((self.page - 1) * self.per_page).limit(self.per_page).all()

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    def page_url(self, page: Optional[int]) -> Optional[str]:
        """URL страницы текущего endpoint с теми же фильтрами"""
        if page is None:
            return None

        args = dict(request.args)
        args.update(request.view_args or {})
        args.update(page=page, per_page=self.per_page)
        return url_for(request.endpoint, **args)

    def links(self) -> Dict[str, Optional[str]]:
        return {
            'first': self.page_url(1),
            'last': self.page_url(max(self.total_pages, 1)),
            'prev': self.page_url(self.page - 1 if self.has_prev else None),
            'next': self.page_url(self.page + 1 if self.has_next else None),
        }

    def meta(self) -> Dict[str, Any]:
        return {
            'page': self.page,
            'per_page': self.per_page,
            'total': self.total,
            'total_pages': self.total_pages
        }


def paginate_query(query: Query, page: int = None, per_page: int = None) -> Pagination:
    """
    Страница результатов запроса

    Args:
        query: SQLAlchemy Query объект
        page: Номер страницы (из request.args если не указан)
        per_page: Элементов на странице (из request.args если не указан)

    Returns:
        Объект Pagination
    """
    if page is None:
        page = request.args.get('page', 1, type=int)

    if per_page is None:
        per_page = request.args.get('per_page', DEFAULT_PER_PAGE, type=int)

    return Pagination(query, page, per_page)


def create_pagination_response(pagination: Pagination, serializer: Callable = None) -> Dict[str, Any]:
    """
    Ответ API со страницей данных

    Args:
        pagination: Объект пагинации
        serializer: Функция сериализации элемента (по умолчанию item.to_dict())

    Returns:
        Словарь {'data': [...], 'meta': {'pagination': ..., 'links': ...}}
    """
    serializer = serializer or (lambda item: item.to_dict())

    return {
        'data': [serializer(item) for item in pagination.items],
        'meta': {
            'pagination': pagination.meta(),
            'links': pagination.links()
        }
    }
