class TaskcardsError(Exception):
    """Base class for errors raised by taskcards."""


class StoreError(TaskcardsError):
    """The task store failed."""


class StoreConfigurationError(StoreError):
    """The store client could not be initialized."""


class StoreWriteError(StoreError):
    """A create, update or delete did not reach the store."""


class DocumentNotFound(StoreWriteError):
    def __init__(self, doc_id: str):
        super().__init__(f"Task document not found: {doc_id}")
        self.doc_id = doc_id


class DispatchError(TaskcardsError):
    """A card action could not be dispatched."""


class UnknownAction(DispatchError):
    def __init__(self, action: str):
        super().__init__(f"Unknown card action: {action}")
        self.action = action


class TaskNotFound(DispatchError):
    def __init__(self, task_id: str):
        super().__init__(f"Task not in the current snapshot: {task_id}")
        self.task_id = task_id
