import pytest

from storefront.core.file_store import InMemoryBackend, JsonFileBackend
from storefront.repositories.cart_session_store import CartSessionStore, safe_quantity


def line(item_id, quantity=1, price=10.0, name=None, image=None):
    return {
        "id": item_id,
        "name": name or f"Item {item_id}",
        "price": price,
        "quantity": quantity,
        "image": image,
    }


@pytest.fixture
def backend():
    return InMemoryBackend()


@pytest.fixture
def store(backend):
    return CartSessionStore(backend)


def quantities(items):
    return {item.id: item.quantity for item in items}


def test_add_new_line(store):
    items = store.add_item("s1", line("A", quantity=2, price=19.999))

    assert len(items) == 1
    assert items[0].id == "A"
    assert items[0].quantity == 2
    assert items[0].price == 20.0


def test_add_existing_line_increments_and_overwrites(store):
    store.add_item("s1", line("A", quantity=2, price=10, name="Old"))
    items = store.add_item("s1", line("A", quantity=3, price=12, name="New", image="/a.png"))

    assert len(items) == 1
    assert items[0].quantity == 5
    assert items[0].name == "New"
    assert items[0].price == 12
    assert items[0].image == "/a.png"


def test_add_defaults_quantity_to_one(store):
    items = store.add_item("s1", {"id": "A", "name": "A", "price": 5})
    assert items[0].quantity == 1


@pytest.mark.parametrize(
    "payload",
    [
        {"id": "", "name": "A", "price": 5},
        {"id": "A", "name": "  ", "price": 5},
        {"id": "A", "name": "A", "price": 0},
        {"id": "A", "name": "A", "price": "free"},
    ],
)
def test_invalid_add_is_a_noop(store, payload):
    store.add_item("s1", line("B"))
    items = store.add_item("s1", payload)

    assert quantities(items) == {"B": 1}


def test_update_quantity_of_missing_id_is_a_noop(store):
    store.add_item("s1", line("A", quantity=2))
    items = store.update_quantity("s1", "missing", 5)

    assert quantities(items) == {"A": 2}


@pytest.mark.parametrize(
    "raw, expected",
    [(3, 3), (2.7, 2), ("4", 4), (0, 1), (-3, 1), ("abc", 1), (None, 1), (float("inf"), 1)],
)
def test_quantity_is_coerced(raw, expected):
    assert safe_quantity(raw) == expected


def test_update_quantity(store):
    store.add_item("s1", line("A"))
    items = store.update_quantity("s1", "A", "7")
    assert quantities(items) == {"A": 7}


def test_remove_and_clear(store):
    store.add_item("s1", line("A"))
    store.add_item("s1", line("B"))

    assert quantities(store.remove_item("s1", "A")) == {"B": 1}
    assert store.clear("s1") == []
    assert store.list_items("s1") == []


def test_merge_sums_quantities_and_empties_source(store):
    store.add_item("guest", line("A", quantity=2))
    store.add_item("user_jane", line("A", quantity=1))
    store.add_item("user_jane", line("B", quantity=1))

    merged = store.merge("guest", "user_jane")

    assert quantities(merged) == {"A": 3, "B": 1}
    assert store.list_items("guest") == []


def test_merge_twice_is_a_noop(store):
    store.add_item("guest", line("A", quantity=2))
    store.merge("guest", "user_jane")
    merged = store.merge("guest", "user_jane")

    assert quantities(merged) == {"A": 2}


def test_merge_into_itself_is_a_noop(store):
    store.add_item("s1", line("A", quantity=2))
    assert quantities(store.merge("s1", "s1")) == {"A": 2}


def test_returned_items_are_copies(store):
    items = store.add_item("s1", line("A"))
    items[0].quantity = 99

    assert quantities(store.list_items("s1")) == {"A": 1}


def test_every_mutation_is_saved(backend, store):
    store.add_item("s1", line("A", quantity=2))

    reloaded = CartSessionStore(backend)
    assert quantities(reloaded.list_items("s1")) == {"A": 2}
    assert "s1" in backend.data["sessions"]


def test_corrupt_entries_are_dropped_on_load():
    backend = InMemoryBackend(
        {
            "sessions": {
                "s1": {
                    "items": [
                        line("A", quantity=2),
                        {"id": "B", "name": "B", "price": -1},
                        "garbage",
                    ],
                    "updated_at": "not-a-date",
                },
                "s2": "garbage",
            }
        }
    )
    store = CartSessionStore(backend)

    assert quantities(store.list_items("s1")) == {"A": 2}
    assert not store.has_session("s2")


def test_json_file_backend_round_trip(tmp_path):
    path = tmp_path / "carts" / "cart-sessions.json"
    store = CartSessionStore(JsonFileBackend(path))
    store.add_item("s1", line("A", quantity=2))

    assert path.exists()
    assert quantities(CartSessionStore(JsonFileBackend(path)).list_items("s1")) == {"A": 2}


def test_json_file_backend_tolerates_bad_json(tmp_path):
    path = tmp_path / "cart-sessions.json"
    path.write_text("{not json", encoding="utf-8")

    assert JsonFileBackend(path).load() is None
    assert CartSessionStore(JsonFileBackend(path)).list_items("s1") == []
