from .task import DOCUMENT_FIELDS, TaskDocument

# Export all models for easy importing
__all__ = ["DOCUMENT_FIELDS", "TaskDocument"]
