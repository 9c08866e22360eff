"""회원 SQLAlchemy ORM 모델 정의.

Member SQLAlchemy ORM model definition.

Tables:
    - member: 팀에 소속될 수 있는 회원 (Member, optionally belonging to a team)
"""

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from querystudy.database import Base
from querystudy.models.base import IdentityMixin
from querystudy.models.team import Team


class Member(IdentityMixin, Base):
    """회원 모델 — 팀과 다대일 관계.

    Member model with a lazy many-to-one association to Team.
    A member may be unaffiliated (``team`` is None).

    Attributes:
        id: 저장소가 부여하는 식별자 (Store-assigned identifier, column ``member_id``)
        username: 회원 이름, nullable (Username)
        age: 나이, 기본값 0 (Age, defaults to 0)
        team_id: 소속 팀 FK, nullable (Team foreign key)

    Relationships:
        team: 소속 팀, 지연 로딩 (Owning team, lazily loaded)
    """

    __tablename__ = "member"

    id: Mapped[int] = mapped_column("member_id", Integer, primary_key=True, autoincrement=True)
    username: Mapped[str | None] = mapped_column(String(255), nullable=True)
    age: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    team_id: Mapped[int | None] = mapped_column(ForeignKey("team.team_id"), nullable=True)

    team: Mapped[Team | None] = relationship(Team, lazy="select")

    def __init__(self, username: str | None, age: int = 0, team: Team | None = None) -> None:
        super().__init__(username=username, age=age)
        if team is not None:
            self.change_team(team)

    def change_team(self, team: Team) -> None:
        """소속 팀을 변경합니다 (Move the member to another team)."""
        self.team = team

    def __repr__(self) -> str:
        return f"Member(id={self.id}, username={self.username!r}, age={self.age})"
