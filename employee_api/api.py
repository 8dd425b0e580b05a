# employee_api/api.py
"""Time-bounded access to the employee store.

Every store call runs on a worker thread and the caller waits at most
`timeout` seconds for it. On timeout the caller gets an operation-specific
StoreTimeout; the worker is told to abandon the call, and mutating calls
check that signal right before committing. A call that is already past its
commit will still finish in the background.
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from functools import partial
from typing import Callable, List, Optional, Type

from .config import STORE_TIMEOUT_SECONDS, STORE_WORKERS
from .exceptions import (
    NoResultReceived,
    StoreTimeout,
    TimeoutCreatingEmployee,
    TimeoutDeletingEmployee,
    TimeoutReadingEmployee,
    TimeoutUpdatingEmployee,
)
from .schemas import Employee, EmployeeIn, EmployeePatch
from .store import EmployeeStore

logger = logging.getLogger(__name__)


class EmployeeAPI:
    def __init__(
        self,
        store: EmployeeStore,
        timeout: float = STORE_TIMEOUT_SECONDS,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        self.store = store
        self.timeout = timeout
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=STORE_WORKERS, thread_name_prefix="employee-store"
        )

    def close(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=False)

    def _bounded(
        self,
        call: Callable,
        timeout_error: Type[StoreTimeout],
        cancel: Optional[threading.Event] = None,
        expect_value: bool = True,
    ):
        future: Future = self._executor.submit(call)
        done, _ = wait([future], timeout=self.timeout)
        if not done:
            if cancel is not None:
                cancel.set()
            future.cancel()
            logger.warning("%s after %.2fs", timeout_error.message, self.timeout)
            raise timeout_error()

        # Re-raises the store's own exception unchanged.
        result = future.result()
        if expect_value and result is None:
            raise NoResultReceived()
        return result

    def create_employee(self, record: EmployeeIn) -> Employee:
        cancel = threading.Event()
        return self._bounded(
            partial(self.store.create, record, cancel=cancel),
            TimeoutCreatingEmployee,
            cancel,
        )

    def read_employee(self, employee_id: int) -> Employee:
        return self._bounded(partial(self.store.read_one, employee_id), TimeoutReadingEmployee)

    def read_employee_list(self, limit: int, offset: int) -> List[Employee]:
        return self._bounded(
            partial(self.store.read_page, limit, offset), TimeoutReadingEmployee
        )

    def update_employee(self, employee_id: int, patch: EmployeePatch) -> Employee:
        cancel = threading.Event()
        return self._bounded(
            partial(self.store.update, employee_id, patch, cancel=cancel),
            TimeoutUpdatingEmployee,
            cancel,
        )

    def delete_employee(self, employee_id: int) -> None:
        cancel = threading.Event()
        self._bounded(
            partial(self.store.delete, employee_id, cancel=cancel),
            TimeoutDeletingEmployee,
            cancel,
            expect_value=False,
        )
