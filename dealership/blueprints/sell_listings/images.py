# dealership/blueprints/sell_listings/images.py
"""
Источники изображений заявки на продажу

Изображения заявки могут лежать в трех местах: в таблице sell_listing_images,
в уже загруженном отношении listing.images и в устаревшем поле image_url.
Источники опрашиваются по порядку, используется первый непустой.
"""

import logging
from abc import ABC, abstractmethod
from dealership.models.listing import SellListingImage

logger = logging.getLogger(__name__)


class ImageSource(ABC):
    """Интерфейс источника изображений заявки"""

    name = 'base'

    @abstractmethod
    def get_urls(self, listing):
        """Список URL изображений заявки (может быть пустым)"""
        pass


class DirectQueryImageSource(ImageSource):
    """Прямой запрос к таблице изображений по sell_listing_id"""

    name = 'direct_query'

    def get_urls(self, listing):
        return [image.url for image in SellListingImage.for_listing(listing.listing_id)]


class RelationImageSource(ImageSource):
    """Изображения из отношения, загруженного вместе с заявкой"""

    name = 'relation'

    def get_urls(self, listing):
        return [image.url for image in listing.images]


class LegacyFieldImageSource(ImageSource):
    """Единственное изображение из устаревшего поля image_url"""

    name = 'legacy_field'

    def get_urls(self, listing):
        return [listing.image_url] if listing.image_url else []


DEFAULT_IMAGE_SOURCES = (
    DirectQueryImageSource(),
    RelationImageSource(),
    LegacyFieldImageSource(),
)


def resolve_listing_image_urls(listing, sources=DEFAULT_IMAGE_SOURCES):
    """
    URL изображений заявки из первого непустого источника

    Args:
        listing: Заявка на продажу
        sources: Источники в порядке приоритета

    Returns:
        Список URL (пустой, если ни один источник ничего не вернул)
    """
    for source in sources:
        urls = [url for url in source.get_urls(listing) if url]
        if urls:
            logger.debug(
                f"Listing {listing.listing_id}: {len(urls)} image(s) from {source.name}"
            )
            return urls

    logger.info(f"Listing {listing.listing_id} has no images in any source")
    return []
