# dealership/blueprints/members/services.py
import logging
from dealership.extensions import db
from dealership.models.member import Member
from dealership.utils.exceptions import MemberNotFoundError
from dealership.utils.pagination import paginate_query

logger = logging.getLogger(__name__)


class MemberService:
    """Сервис участников публичного сайта"""

    @staticmethod
    def search_members(filters):
        query = Member.query

        if filters.get('is_active') is not None:
            query = query.filter(Member.is_active == filters['is_active'])

        if filters.get('search'):
            query = Member.search(query, filters['search'].strip())

        query = query.order_by(Member.created_at.desc(), Member.member_id.desc())
        return paginate_query(query, filters.get('page'), filters.get('per_page'))

    @staticmethod
    def get_member(member_id):
        member = db.session.get(Member, member_id)
        if not member:
            raise MemberNotFoundError(member_id)
        return member

    @staticmethod
    def set_active(member_id, is_active):
        member = MemberService.get_member(member_id)
        member.is_active = is_active
        member.touch()
        db.session.commit()

        logger.info(f"Member {member_id} {'activated' if is_active else 'deactivated'}")
        return member

    @staticmethod
    def delete_member(member_id):
        """Удаление участника, его заявки остаются без привязки"""
        member = MemberService.get_member(member_id)
        for listing in member.sell_listings:
            listing.member_id = None
        db.session.delete(member)
        db.session.commit()
        logger.info(f"Member deleted: {member_id}")
