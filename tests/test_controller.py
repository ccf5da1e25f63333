import pytest

from conftest import ALICE, BOB, make_todo
from todo_service.controller import Outcome, Result, TodoResourceController
from todo_service.db import SQLiteRepository
from todo_service.errors import TodoNotFound
from todo_service.schemas import TodoForm


@pytest.fixture
def controller(memory_repo) -> TodoResourceController:
    return TodoResourceController(memory_repo)


class TestFindOwned:
    def test_returns_own_todo(self, controller, memory_repo):
        todo = make_todo(memory_repo, ALICE)
        assert controller.find_owned(ALICE, todo["id"]) == todo

    def test_foreign_and_missing_raise_the_same_error(self, controller, memory_repo):
        foreign = make_todo(memory_repo, BOB)
        with pytest.raises(TodoNotFound) as foreign_exc:
            controller.find_owned(ALICE, foreign["id"])
        with pytest.raises(TodoNotFound) as missing_exc:
            controller.find_owned(ALICE, -1)
        assert str(foreign_exc.value) == str(missing_exc.value) == "Todo not found"

    def test_fetch_for_edit_uses_ownership_check(self, controller, memory_repo):
        todo = make_todo(memory_repo, BOB)
        with pytest.raises(TodoNotFound):
            controller.fetch_for_edit(ALICE, todo["id"])
        assert controller.fetch_for_edit(BOB, todo["id"])["id"] == todo["id"]


class TestList:
    def test_only_own_todos(self, controller, memory_repo):
        mine = [make_todo(memory_repo, ALICE, f"Mine {i}") for i in range(3)]
        theirs = [make_todo(memory_repo, BOB, f"Theirs {i}") for i in range(2)]
        listed = {t["id"] for t in controller.list(ALICE)}
        assert listed == {t["id"] for t in mine}
        assert listed.isdisjoint(t["id"] for t in theirs)

    def test_empty_for_new_actor(self, controller, memory_repo):
        make_todo(memory_repo, BOB)
        assert controller.list(ALICE) == []


class TestPrepareNew:
    def test_blank_and_unsaved(self, controller, memory_repo):
        form = controller.prepare_new(ALICE)
        assert form == TodoForm()
        assert form.title is None
        assert form.complete is False
        assert memory_repo.count() == 0


class TestCreate:
    def test_valid_form_creates_owned_todo(self, controller, memory_repo):
        result = controller.create(ALICE, TodoForm(title="  Buy milk  "))
        assert result.kind is Outcome.CREATED
        assert result.ok
        assert result.todo["owner_id"] == "alice"
        # Titles are trimmed
        assert result.todo["title"] == "Buy milk"
        assert result.todo["complete"] is False
        assert memory_repo.count() == 1

    @pytest.mark.parametrize("title", [None, "", "   ", "x" * 201])
    def test_invalid_title_is_rejected(self, controller, memory_repo, title):
        form = TodoForm(title=title)
        result = controller.create(ALICE, form)
        assert result.kind is Outcome.VALIDATION_FAILED
        assert not result.ok
        assert result.form is form
        assert result.errors
        assert result.errors[0]["loc"] == ("title",)
        assert memory_repo.count() == 0


class TestUpdate:
    def test_applies_submitted_fields(self, controller, memory_repo):
        todo = make_todo(memory_repo, ALICE, "Old")
        result = controller.update(ALICE, todo["id"], TodoForm(title="New", complete=True))
        assert result.kind is Outcome.UPDATED
        assert result.todo["title"] == "New"
        assert result.todo["complete"] is True
        assert result.todo["owner_id"] == "alice"

    def test_unsubmitted_fields_are_kept(self, controller, memory_repo):
        todo = make_todo(memory_repo, ALICE, "Old", complete=True)
        result = controller.update(ALICE, todo["id"], TodoForm(title="New"))
        assert result.todo["complete"] is True

    def test_null_title_is_rejected(self, controller, memory_repo):
        todo = make_todo(memory_repo, ALICE, "Old")
        result = controller.update(ALICE, todo["id"], TodoForm(title=None))
        assert result.kind is Outcome.VALIDATION_FAILED
        assert memory_repo.find_by_id(todo["id"]) == todo

    def test_foreign_todo_is_untouched(self, controller, memory_repo):
        todo = make_todo(memory_repo, BOB, "Bob's")
        with pytest.raises(TodoNotFound):
            controller.update(ALICE, todo["id"], TodoForm(title="Mine now", complete=True))
        assert memory_repo.find_by_id(todo["id"]) == todo

    def test_missing_todo_raises(self, controller):
        with pytest.raises(TodoNotFound):
            controller.update(ALICE, 42, TodoForm(title="Nope"))


class TestDestroy:
    def test_deletes_own_todo(self, controller, memory_repo):
        todo = make_todo(memory_repo, ALICE)
        result = controller.destroy(ALICE, todo["id"])
        assert result.kind is Outcome.DELETED
        assert result.count == 1
        assert result.todo["id"] == todo["id"]
        assert not memory_repo.exists(todo["id"])

    def test_foreign_todo_survives(self, controller, memory_repo):
        todo = make_todo(memory_repo, BOB)
        with pytest.raises(TodoNotFound):
            controller.destroy(ALICE, todo["id"])
        assert memory_repo.exists(todo["id"])


class TestMarkComplete:
    def test_sets_complete(self, controller, memory_repo):
        todo = make_todo(memory_repo, ALICE)
        result = controller.mark_complete(ALICE, todo["id"])
        assert result.kind is Outcome.UPDATED
        assert memory_repo.find_by_id(todo["id"])["complete"] is True

    def test_already_complete_stays_complete(self, controller, memory_repo):
        todo = make_todo(memory_repo, ALICE, complete=True)
        result = controller.mark_complete(ALICE, todo["id"])
        assert result.todo["complete"] is True

    def test_foreign_todo_flag_unchanged(self, controller, memory_repo):
        todo = make_todo(memory_repo, BOB)
        with pytest.raises(TodoNotFound):
            controller.mark_complete(ALICE, todo["id"])
        assert memory_repo.find_by_id(todo["id"])["complete"] is False


class TestDeleteAll:
    def test_removes_only_own_todos(self, controller, memory_repo):
        for i in range(3):
            make_todo(memory_repo, ALICE, f"Mine {i}")
        theirs = [make_todo(memory_repo, BOB, f"Theirs {i}") for i in range(4)]

        result = controller.delete_all(ALICE)

        assert result.kind is Outcome.DELETED
        assert result.count == 3
        assert memory_repo.count() == len(theirs)
        assert all(memory_repo.exists(t["id"]) for t in theirs)

    def test_nothing_owned(self, controller, memory_repo):
        make_todo(memory_repo, BOB)
        result = controller.delete_all(ALICE)
        assert result.count == 0
        assert memory_repo.count() == 1


class TestOutcome:
    def test_only_validation_failure_is_not_ok(self):
        assert [k for k in Outcome if not Result(kind=k).ok] == [Outcome.VALIDATION_FAILED]
        assert Outcome.CREATED.value == "created"


class TestSQLiteBackedController:
    def test_id_beyond_integer_range_is_not_found(self, tmp_path):
        controller = TodoResourceController(SQLiteRepository(str(tmp_path / "todos.db")))
        huge = 2 ** 63
        with pytest.raises(TodoNotFound):
            controller.fetch_for_edit(ALICE, huge)
        with pytest.raises(TodoNotFound):
            controller.update(ALICE, huge, TodoForm(title="Nope"))
        with pytest.raises(TodoNotFound):
            controller.destroy(ALICE, huge)
        with pytest.raises(TodoNotFound):
            controller.mark_complete(ALICE, huge)
