# Record stores

from app.db.base import RecordStore


def build_record_store() -> RecordStore:
    """Postgres-backed store; imported lazily so the generated Prisma client is only needed at runtime."""
    from app.db.prisma_store import PrismaRecordStore

    return PrismaRecordStore()


__all__ = ["build_record_store", "RecordStore"]
