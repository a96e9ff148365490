# dealership/blueprints/features/services.py
import logging
from dealership.extensions import db
from dealership.models.car import Feature
from dealership.utils.exceptions import FeatureNotFoundError, ConflictError

logger = logging.getLogger(__name__)


class FeatureService:
    """Сервис для работы с особенностями комплектации"""

    @staticmethod
    def get_features():
        return Feature.query.order_by(Feature.name).all()

    @staticmethod
    def get_feature(feature_id):
        feature = db.session.get(Feature, feature_id)
        if not feature:
            raise FeatureNotFoundError(feature_id)
        return feature

    @staticmethod
    def get_features_by_ids(feature_ids):
        """
        Особенности по списку ID

        Raises:
            FeatureNotFoundError: Если хотя бы одна особенность не найдена
        """
        if not feature_ids:
            return []

        features = Feature.query.filter(Feature.feature_id.in_(feature_ids)).all()
        missing = set(feature_ids) - {feature.feature_id for feature in features}
        if missing:
            raise FeatureNotFoundError(min(missing))
        return features

    @staticmethod
    def create_feature(name):
        name = name.strip()
        if Feature.find_by_name(name):
            raise ConflictError(f"Feature '{name}' already exists")

        feature = Feature(name=name)
        db.session.add(feature)
        db.session.commit()

        logger.info(f"Feature created: {feature.feature_id} ({feature.name})")
        return feature

    @staticmethod
    def update_feature(feature_id, name):
        feature = FeatureService.get_feature(feature_id)

        name = name.strip()
        existing = Feature.find_by_name(name)
        if existing and existing.feature_id != feature.feature_id:
            raise ConflictError(f"Feature '{name}' already exists")

        feature.name = name
        feature.touch()
        db.session.commit()
        return feature

    @staticmethod
    def delete_feature(feature_id):
        """Удаление особенности вместе с ее связями с автомобилями"""
        feature = FeatureService.get_feature(feature_id)
        feature.cars = []
        db.session.delete(feature)
        db.session.commit()
        logger.info(f"Feature deleted: {feature_id}")
