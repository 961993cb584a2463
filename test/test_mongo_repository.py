from datetime import date, datetime, timezone
from unittest.mock import MagicMock, patch

import pytest
from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import ServerSelectionTimeoutError

from core.domain.errors import StoreError, StoreUninitializedError
from core.domain.models.task import Task, TaskPriority, TaskStatus
from infrastructure.config import Settings
from infrastructure.mongo.repository.task_repository import MongoTaskRepository
from infrastructure.mongo.session.client import MongoConnection

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def _doc(**overrides):
    doc = {
        "_id": ObjectId(),
        "title": "Found Task",
        "description": "Found Description",
        "priority": "medium",
        "status": "todo",
        "dueDate": None,
        "createdAt": NOW,
        "updatedAt": NOW,
    }
    doc.update(overrides)
    return doc


@pytest.fixture
def mock_mongo_collection():
    collection = MagicMock()
    return collection


@pytest.fixture
def mongo_repository(mock_mongo_collection):
    repo = MongoTaskRepository(MagicMock())
    repo.collection = mock_mongo_collection
    return repo


def test_add_task(mongo_repository, mock_mongo_collection):
    inserted_id = ObjectId()
    mock_mongo_collection.insert_one.return_value.inserted_id = inserted_id

    task = mongo_repository.add(
        Task(title="Test Task", priority=TaskPriority.HIGH, due_date=date(2026, 11, 1))
    )

    mock_mongo_collection.insert_one.assert_called_once()
    document = mock_mongo_collection.insert_one.call_args.args[0]
    assert document["title"] == "Test Task"
    assert document["priority"] == "high"
    assert document["status"] == "todo"
    assert document["description"] == ""
    assert document["dueDate"] == datetime(2026, 11, 1, tzinfo=timezone.utc)
    assert document["createdAt"] == document["updatedAt"]
    assert task.id == str(inserted_id)
    assert task.due_date == date(2026, 11, 1)


def test_get_task_found(mongo_repository, mock_mongo_collection):
    doc = _doc()
    mock_mongo_collection.find_one.return_value = doc

    result = mongo_repository.get(str(doc["_id"]))

    assert result is not None
    assert result.id == str(doc["_id"])
    assert result.title == "Found Task"
    assert result.priority == TaskPriority.MEDIUM
    mock_mongo_collection.find_one.assert_called_once_with({"_id": doc["_id"]})


def test_get_task_not_found(mongo_repository, mock_mongo_collection):
    mock_mongo_collection.find_one.return_value = None

    assert mongo_repository.get(str(ObjectId())) is None


def test_get_task_with_malformed_id_is_not_found(mongo_repository, mock_mongo_collection):
    assert mongo_repository.get("no-es-un-object-id") is None
    mock_mongo_collection.find_one.assert_not_called()


def test_list_tasks_sorted_by_creation_desc(mongo_repository, mock_mongo_collection):
    docs = [_doc(title="Task 2", status="completed"), _doc(title="Task 1")]
    mock_mongo_collection.find.return_value.sort.return_value = docs

    results = mongo_repository.list()

    mock_mongo_collection.find.return_value.sort.assert_called_once_with(
        "createdAt", DESCENDING
    )
    assert [t.title for t in results] == ["Task 2", "Task 1"]
    assert results[0].status == TaskStatus.COMPLETED


def test_update_task_sets_only_supplied_fields(mongo_repository, mock_mongo_collection):
    doc = _doc(status="completed")
    mock_mongo_collection.find_one_and_update.return_value = doc

    result = mongo_repository.update(str(doc["_id"]), {"status": TaskStatus.COMPLETED})

    args, kwargs = mock_mongo_collection.find_one_and_update.call_args
    assert args[0] == {"_id": doc["_id"]}
    assert set(args[1]["$set"]) == {"status", "updatedAt"}
    assert args[1]["$set"]["status"] == "completed"
    assert kwargs["return_document"] is ReturnDocument.AFTER
    assert result is not None
    assert result.status == TaskStatus.COMPLETED


def test_update_task_not_found(mongo_repository, mock_mongo_collection):
    mock_mongo_collection.find_one_and_update.return_value = None

    assert mongo_repository.update(str(ObjectId()), {"title": "x"}) is None


def test_delete_task(mongo_repository, mock_mongo_collection):
    task_id = ObjectId()
    mock_mongo_collection.delete_one.return_value.deleted_count = 1

    assert mongo_repository.delete(str(task_id)) is True
    mock_mongo_collection.delete_one.assert_called_once_with({"_id": task_id})


def test_delete_task_not_found(mongo_repository, mock_mongo_collection):
    mock_mongo_collection.delete_one.return_value.deleted_count = 0

    assert mongo_repository.delete(str(ObjectId())) is False


def test_driver_errors_become_store_errors(mongo_repository, mock_mongo_collection):
    mock_mongo_collection.find.side_effect = ServerSelectionTimeoutError("down")

    with pytest.raises(StoreError):
        mongo_repository.list()


def test_connection_get_db_before_initialize_raises():
    connection = MongoConnection(Settings())

    with pytest.raises(StoreUninitializedError):
        connection.get_db()
    connection.shutdown()


@pytest.fixture
def mongo_client_cls():
    with patch("infrastructure.mongo.session.client.MongoClient") as mocked:
        yield mocked


@pytest.fixture
def sleep():
    with patch("infrastructure.retry.time.sleep") as mocked:
        yield mocked


def test_connection_unreachable_retries_then_returns_false(mongo_client_cls, sleep):
    client = mongo_client_cls.return_value
    client.admin.command.side_effect = ServerSelectionTimeoutError("down")
    connection = MongoConnection(
        Settings(db_connect_retry_max=4, db_connect_retry_delay_ms=250)
    )

    assert connection.initialize() is False

    assert client.admin.command.call_count == 4
    assert sleep.call_count == 3
    sleep.assert_called_with(0.25)
    assert connection.ping() is False
    connection.shutdown()
    connection.shutdown()
    client.close.assert_called_once()


def test_connection_succeeds_after_transient_failure(mongo_client_cls, sleep):
    client = mongo_client_cls.return_value
    client.admin.command.side_effect = [ServerSelectionTimeoutError("down"), {"ok": 1}]
    connection = MongoConnection(Settings(db_connect_retry_max=6))

    assert connection.initialize() is True

    assert client.admin.command.call_count == 2
    assert sleep.call_count == 1
    connection.shutdown()


@pytest.mark.parametrize("retry_delay_ms", [0, 1000])
def test_client_selection_timeout_is_independent_of_retry_delay(
    mongo_client_cls, sleep, retry_delay_ms
):
    connection = MongoConnection(
        Settings(
            db_connect_retry_delay_ms=retry_delay_ms,
            mongo_server_selection_timeout_ms=30000,
        )
    )

    connection.initialize()

    kwargs = mongo_client_cls.call_args.kwargs
    assert kwargs["serverSelectionTimeoutMS"] == 30000
    connection.shutdown()


def test_shutdown_without_initialize_is_safe():
    connection = MongoConnection(Settings())

    connection.shutdown()
    connection.shutdown()
    assert connection.ping() is False
