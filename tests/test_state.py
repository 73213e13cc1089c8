import pytest
from pydantic import ValidationError

from smartmed import state
from smartmed.schemas import Notification


def test_initial_state_has_sample_inventory():
    assert len(state.initial_state().inventory) == len(state.SAMPLE_INVENTORY)
    assert state.initial_state(sample=False).inventory == ()


def test_reducers_do_not_mutate_previous_state(make_item):
    before = state.initial_state(sample=False)

    after = state.add_item(before, make_item("A"))

    assert before.inventory == ()
    assert [item.id for item in after.inventory] == ["A"]


def test_set_inventory_replaces_wholesale(make_item):
    current = state.set_inventory(state.initial_state(), [make_item("A"), make_item("B")])

    assert [item.id for item in current.inventory] == ["A", "B"]


def test_update_item_accepts_aliases_and_field_names(make_item):
    current = state.set_inventory(state.initial_state(), [make_item("A"), make_item("B")])

    current = state.update_item(current, "A", {"currentStock": 3})
    current = state.update_item(current, "B", {"location": "Shelf Z9"})

    assert current.inventory[0].current_stock == 3
    assert current.inventory[1].location == "Shelf Z9"


def test_update_item_rejects_negative_stock(make_item):
    current = state.set_inventory(state.initial_state(), [make_item("A")])

    with pytest.raises(ValidationError):
        state.update_item(current, "A", {"current_stock": -1})


def test_remove_item_and_search_results(make_item):
    current = state.set_inventory(state.initial_state(), [make_item("A"), make_item("B")])

    current = state.remove_item(current, "A")
    current = state.set_search_results(current, [make_item("B")])

    assert [item.id for item in current.inventory] == ["B"]
    assert [item.id for item in current.search_results] == ["B"]


def test_notification_lifecycle():
    first = Notification(title="Low stock alert", message="2 items", type="low-stock")
    second = Notification(title="Items expiring soon", message="1 item", type="expiring")
    current = state.initial_state()

    current = state.add_notification(current, first)
    current = state.add_notification(current, second)
    assert [n.id for n in current.notifications] == [second.id, first.id]
    assert state.unread_count(current) == 2

    current = state.mark_as_read(current, first.id)
    assert state.unread_count(current) == 1

    current = state.remove_notification(current, second.id)
    assert state.unread_count(current) == 0
    assert len(current.notifications) == 1

    current = state.add_notification(current, second)
    current = state.mark_all_as_read(current)
    assert state.unread_count(current) == 0

    assert state.clear_notifications(current).notifications == ()


def test_store_dispatch_updates_current_state(make_item):
    store = state.AppStore(state.initial_state(sample=False))

    store.dispatch(state.add_item, make_item("A"))
    store.dispatch(
        state.set_preferences, state.NotificationPreferences(low_stock=False)
    )

    assert [item.id for item in store.inventory] == ["A"]
    assert store.state.preferences.low_stock is False
