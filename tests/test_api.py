"""
Tests for employee_api/api.py - the time-bounded wrapper around the store.
"""
import threading

import pytest

from employee_api.api import EmployeeAPI
from employee_api.exceptions import (
    EmployeeNotFound,
    NoResultReceived,
    StoreTimeout,
    TimeoutCreatingEmployee,
    TimeoutDeletingEmployee,
    TimeoutReadingEmployee,
    TimeoutUpdatingEmployee,
)
from employee_api.schemas import EmployeeIn, EmployeePatch
from employee_api.store import EmployeeStore


class BlockingStore:
    """Store double whose calls wait until `release` is set."""

    def __init__(self):
        self.release = threading.Event()
        self.cancel_events = []

    def _block(self, cancel=None):
        if cancel is not None:
            self.cancel_events.append(cancel)
        self.release.wait(2)

    def create(self, record, cancel=None):
        self._block(cancel)
        return record

    def read_one(self, employee_id):
        self._block()
        return employee_id

    def read_page(self, limit, offset):
        self._block()
        return []

    def update(self, employee_id, patch, cancel=None):
        self._block(cancel)
        return patch

    def delete(self, employee_id, cancel=None):
        self._block(cancel)


class ScriptedStore:
    """Store double returning or raising preset outcomes."""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error

    def _outcome(self):
        if self.error is not None:
            raise self.error
        return self.result

    def create(self, record, cancel=None):
        return self._outcome()

    def read_one(self, employee_id):
        return self._outcome()

    def read_page(self, limit, offset):
        return self._outcome()

    def update(self, employee_id, patch, cancel=None):
        return self._outcome()

    def delete(self, employee_id, cancel=None):
        return self._outcome()


OPERATIONS = [
    ("create_employee", (EmployeeIn(name="Dan", designation="Dev", salary=1),), TimeoutCreatingEmployee),
    ("read_employee", (1,), TimeoutReadingEmployee),
    ("read_employee_list", (10, 0), TimeoutReadingEmployee),
    ("update_employee", (1, EmployeePatch(salary=2)), TimeoutUpdatingEmployee),
    ("delete_employee", (1,), TimeoutDeletingEmployee),
]


class TestTimeouts:

    @pytest.mark.parametrize("method,args,expected", OPERATIONS)
    def test_slow_store_raises_operation_timeout(self, method, args, expected):
        store = BlockingStore()
        api = EmployeeAPI(store, timeout=0.05)
        try:
            with pytest.raises(expected) as exc_info:
                getattr(api, method)(*args)
        finally:
            store.release.set()
            api.close()

        assert isinstance(exc_info.value, StoreTimeout)

    def test_timeout_messages(self):
        assert str(TimeoutCreatingEmployee()) == "timeout occurred while creating employee"
        assert str(TimeoutReadingEmployee()) == "timeout occurred while reading employee"
        assert str(TimeoutUpdatingEmployee()) == "timeout occurred while updating employee"
        assert str(TimeoutDeletingEmployee()) == "timeout occurred while deleting employee"

    def test_timeout_signals_cancel_to_running_write(self):
        store = BlockingStore()
        api = EmployeeAPI(store, timeout=0.2)
        try:
            with pytest.raises(TimeoutUpdatingEmployee):
                api.update_employee(1, EmployeePatch(salary=2))
        finally:
            store.release.set()
            api.close()

        assert len(store.cancel_events) == 1
        assert store.cancel_events[0].is_set()

    def test_timed_out_create_is_not_committed(self, store):
        gate = threading.Event()

        class SlowStore(EmployeeStore):
            def create(self, record, cancel=None):
                gate.wait(2)
                return super().create(record, cancel=cancel)

        slow = SlowStore(store.session_factory)
        api = EmployeeAPI(slow, timeout=0.05)

        with pytest.raises(TimeoutCreatingEmployee):
            api.create_employee(EmployeeIn(name="Dan", designation="Dev", salary=1))

        gate.set()
        api._executor.shutdown(wait=True)

        assert store.read_page(10, 0) == []


class TestPassThrough:

    @pytest.mark.parametrize("method,args,_", OPERATIONS)
    def test_store_error_propagates_unchanged(self, method, args, _):
        boom = RuntimeError("connection reset")
        api = EmployeeAPI(ScriptedStore(error=boom))
        try:
            with pytest.raises(RuntimeError) as exc_info:
                getattr(api, method)(*args)
        finally:
            api.close()

        assert exc_info.value is boom

    def test_store_builtin_timeout_error_is_not_reclassified(self):
        err = TimeoutError("socket timed out")
        api = EmployeeAPI(ScriptedStore(error=err))
        try:
            with pytest.raises(TimeoutError) as exc_info:
                api.read_employee(1)
        finally:
            api.close()

        assert exc_info.value is err
        assert not isinstance(exc_info.value, StoreTimeout)

    def test_not_found_propagates(self, api):
        with pytest.raises(EmployeeNotFound):
            api.read_employee(5)

    @pytest.mark.parametrize("method,args", [
        ("read_employee", (1,)),
        ("read_employee_list", (10, 0)),
        ("update_employee", (1, EmployeePatch(name="X"))),
    ])
    def test_missing_value_raises_no_result(self, method, args):
        api = EmployeeAPI(ScriptedStore(result=None))
        try:
            with pytest.raises(NoResultReceived, match="no result received before timeout"):
                getattr(api, method)(*args)
        finally:
            api.close()

    def test_delete_returns_none(self, api, dan):
        assert api.delete_employee(dan.id) is None


class TestRoundTrip:

    def test_create_read_update_delete(self, api):
        created = api.create_employee(
            EmployeeIn(name="Dan", designation="Software Developer", salary=23456.00)
        )
        assert api.read_employee(created.id) == created

        updated = api.update_employee(created.id, EmployeePatch(salary=11111.00))
        assert updated.salary == 11111.00
        assert updated.name == "Dan"
        assert updated.updated_at > created.updated_at

        assert api.read_employee_list(10, 0) == [updated]

        api.delete_employee(created.id)
        with pytest.raises(EmployeeNotFound):
            api.read_employee(created.id)

    def test_list_empty_table_is_empty(self, api):
        assert api.read_employee_list(10, 0) == []

    def test_shared_executor_is_not_closed(self):
        from concurrent.futures import ThreadPoolExecutor

        executor = ThreadPoolExecutor(max_workers=1)
        api = EmployeeAPI(ScriptedStore(result=[]), executor=executor)
        api.close()

        assert executor.submit(lambda: 3).result() == 3
        executor.shutdown()
