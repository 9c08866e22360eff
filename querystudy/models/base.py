"""엔티티 공통 동작 — 식별자 기반 동등성.

Shared entity behaviour: equality by store-assigned identity.
"""


class IdentityMixin:
    """영속 엔티티는 (타입, id)로 비교합니다.

    Persisted entities compare equal when type and id match; transient
    entities (no id yet) are only equal to themselves. The hash only uses
    the type so it stays stable when an id is assigned on flush; the cost
    is that a set or dict of one entity type falls into a single hash
    bucket, so membership checks there are linear. Key large lookups by
    ``entity.id`` instead.
    """

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if type(other) is not type(self):
            return NotImplemented
        own_id = getattr(self, "id", None)
        return own_id is not None and own_id == getattr(other, "id", None)

    def __hash__(self) -> int:
        return hash(type(self))
