import json

import pytest

from catalog.core.models import Item
from catalog.errors import ItemNotFound, StorageError
from catalog.storage.json_store import JSONItemRepository


def test_file_layout(json_repo):
    json_repo.insert(Item(name="shoes", category="fashion", image_name="a.jpg"))
    json_repo.insert(Item(name="ball", category="toys"))

    data = json.loads(json_repo.file_path.read_text(encoding="utf-8"))
    assert data == {
        "items": [
            {"id": 1, "name": "shoes", "category": "fashion", "image": "a.jpg"},
            {"id": 2, "name": "ball", "category": "toys", "image": ""},
        ]
    }


def test_missing_file_is_empty_store(tmp_path):
    repo = JSONItemRepository(tmp_path / "nested" / "items.json")
    assert repo.list_all() == []
    assert not repo.file_path.exists()


def test_legacy_records_get_positional_ids(json_repo):
    json_repo.file_path.write_text(
        json.dumps({"items": [
            {"name": "jacket", "category": "fashion", "image": "j.jpg"},
            {"name": "ball", "category": "toys", "image": "b.jpg"},
        ]}),
        encoding="utf-8",
    )

    assert json_repo.select(2).name == "ball"
    stored = json_repo.insert(Item(name="doll", category="toys"))
    assert stored.id == 3


def test_select_beyond_count_is_not_found(json_repo):
    json_repo.insert(Item(name="shoes", category="fashion"))
    with pytest.raises(ItemNotFound):
        json_repo.select(2)


def test_non_ascii_names_round_trip(json_repo):
    json_repo.insert(Item(name="靴", category="ファッション"))
    assert json_repo.search("ファッ")[0].name == "靴"
    assert "ファッション" in json_repo.file_path.read_text(encoding="utf-8")


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        json.dumps([1, 2, 3]),
        json.dumps({"items": "nope"}),
        json.dumps({"items": [{"category": "no name"}]}),
        json.dumps({"items": ["just a string"]}),
        json.dumps({"items": [{"id": 1, "name": "a", "category": None, "image": ""}]}),
        json.dumps({"items": [{"id": 1, "name": 7, "category": "toys", "image": ""}]}),
        json.dumps({"items": [{"id": 1, "name": "a", "category": "toys", "image": 5}]}),
    ],
)
def test_malformed_file_raises_storage_error(json_repo, content):
    json_repo.file_path.write_text(content, encoding="utf-8")

    with pytest.raises(StorageError):
        json_repo.list_all()
    with pytest.raises(StorageError):
        json_repo.search("a")
    with pytest.raises(StorageError):
        json_repo.insert(Item(name="x", category="y"))


def test_insert_leaves_no_temporary_files(json_repo):
    json_repo.insert(Item(name="shoes", category="fashion"))
    assert [p.name for p in json_repo.file_path.parent.iterdir()] == ["items.json"]


def test_categories_in_first_seen_order(json_repo):
    for name, category in [("a", "toys"), ("b", "fashion"), ("c", "toys")]:
        json_repo.insert(Item(name=name, category=category))

    assert [(c.id, c.name) for c in json_repo.list_categories()] == [(1, "toys"), (2, "fashion")]
