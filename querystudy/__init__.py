"""Querystudy — SQLAlchemy 기반 타입 안전 쿼리 빌더 학습 프로젝트.

Type-safe query builder and persistence layer over a Member/Team model.
"""
