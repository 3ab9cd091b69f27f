"""Repository for upload history persistence."""

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, select

from zhaiyao.db_models import AudioUpload
from zhaiyao.domain.models import UploadRecord
from zhaiyao.exceptions import UploadPersistenceError
from zhaiyao.logging import setup_logging

logger = setup_logging()


def init_db(engine: Engine) -> None:
    SQLModel.metadata.create_all(engine)


class UploadRepository:
    """
    Handles database operations for the upload history.

    Rows are append-only: one per ingestion attempt, never updated or
    deleted.
    """

    def __init__(self, session_factory):
        """
        Initializes the repository.

        Args:
            session_factory: Callable that returns a SQLModel Session context manager.
        """
        self._session_factory = session_factory

    def insert(self, record: UploadRecord) -> AudioUpload | None:
        """
        Persists one upload history row.

        Args:
            record: The attempt to store. Missing timestamps default to now.

        Returns:
            The stored row with its generated id.

        Raises:
            UploadPersistenceError: If the insert fails.
        """
        values = record.model_dump(exclude_none=True)
        values["status"] = record.status.value
        try:
            with self._session_factory() as db_session:
                row = AudioUpload(**values)
                db_session.add(row)
                db_session.commit()
                db_session.refresh(row)

                logger.info(
                    "Upload record persisted",
                    extra={
                        "upload_id": row.id,
                        "file_name": row.filename,
                        "status": row.status,
                    },
                )
                return row

        except Exception as e:
            logger.exception(
                "Failed to persist upload record",
                extra={"file_name": record.filename},
            )
            raise UploadPersistenceError(record.filename, cause=e) from e

    def list_by_user(self, user_identifier: str) -> list[AudioUpload]:
        """Returns every row for the user, newest first."""
        with self._session_factory() as db_session:
            statement = (
                select(AudioUpload)
                .where(AudioUpload.user_identifier == (user_identifier or ""))
                .order_by(AudioUpload.created_at.desc(), AudioUpload.id.desc())
            )
            return list(db_session.exec(statement).all())
