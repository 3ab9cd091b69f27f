from .upload_repository import UploadRepository, init_db

__all__ = ["UploadRepository", "init_db"]
