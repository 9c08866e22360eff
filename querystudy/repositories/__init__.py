"""데이터 접근 레포지토리 패키지 (Data access repositories)."""

from querystudy.repositories.member_repository import MemberRepository, member_repository
from querystudy.repositories.team_repository import TeamRepository, team_repository

__all__ = ["MemberRepository", "member_repository", "TeamRepository", "team_repository"]
