# employee_api/exceptions.py


class EmployeeError(Exception):
    """Base class for errors raised by the store and its time-bounded wrapper."""


class EmployeeNotFound(EmployeeError):
    def __init__(self, employee_id: int):
        super().__init__(f"employee {employee_id} not found")
        self.employee_id = employee_id


class StoreTimeout(EmployeeError):
    message = "timeout occurred while accessing employee"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class TimeoutCreatingEmployee(StoreTimeout):
    message = "timeout occurred while creating employee"


class TimeoutReadingEmployee(StoreTimeout):
    message = "timeout occurred while reading employee"


class TimeoutUpdatingEmployee(StoreTimeout):
    message = "timeout occurred while updating employee"


class TimeoutDeletingEmployee(StoreTimeout):
    message = "timeout occurred while deleting employee"


class NoResultReceived(EmployeeError):
    def __init__(self):
        super().__init__("no result received before timeout")


class OperationCancelled(EmployeeError):
    """A write was abandoned before commit because its caller stopped waiting."""
