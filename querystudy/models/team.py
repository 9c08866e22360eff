"""팀 SQLAlchemy ORM 모델 정의.

Team SQLAlchemy ORM model definition.

Tables:
    - team: 회원이 소속되는 팀 (Team that members belong to)
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from querystudy.database import Base
from querystudy.models.base import IdentityMixin


class Team(IdentityMixin, Base):
    """팀 모델.

    Team model. The list of members is not mapped as a collection on this
    side; it is looked up on demand by foreign key
    (see ``TeamRepository.get_members``), so it can never go stale.

    Attributes:
        id: 저장소가 부여하는 식별자 (Store-assigned identifier, column ``team_id``)
        team_name: 팀 이름 (Team name)
    """

    __tablename__ = "team"

    id: Mapped[int] = mapped_column("team_id", Integer, primary_key=True, autoincrement=True)
    team_name: Mapped[str] = mapped_column(String(255), nullable=False)

    def __init__(self, team_name: str) -> None:
        super().__init__(team_name=team_name)

    def __repr__(self) -> str:
        return f"Team(id={self.id}, team_name={self.team_name!r})"
