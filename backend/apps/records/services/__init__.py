from .record_service import DynamicRecordService  # noqa: F401
