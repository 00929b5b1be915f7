"""Unit tests for MergeEngine snapshot imports."""

from custom_components.kidstraining import const, data_builders as db
from custom_components.kidstraining.engines.merge_engine import MergeEngine

TODAY = "2025-04-07"


def _session(session_id: str, child_id: str, date_key: str = TODAY) -> dict:
    return {
        const.DATA_INTERNAL_ID: session_id,
        const.DATA_SESSION_CHILD_ID: child_id,
        const.DATA_SESSION_STATUS: const.SESSION_STATUS_COMPLETED,
        const.DATA_SESSION_DATE_KEY: date_key,
        const.DATA_SESSION_DURATION: 30,
        const.DATA_SESSION_SKIN_CATEGORY: const.SKIN_CATEGORY_STUDY,
        const.DATA_SESSION_WALLET_COINS_DELTA: 10,
        const.DATA_SESSION_WALLET_TICKETS_DELTA: 0,
        const.DATA_SESSION_WALLET_TICKET_PROGRESS_DELTA: 1,
        const.DATA_SESSION_TREASURE_PROGRESS_DELTA: 1,
    }


def _state_with_child(child_id: str, name: str) -> dict:
    state = db.build_empty_state()
    state[const.DATA_CHILDREN][child_id] = {
        const.DATA_INTERNAL_ID: child_id,
        const.DATA_CHILD_NAME: name,
    }
    state[const.DATA_WALLETS][child_id] = {
        "study": {"coins": 10, "tickets": 0, "ticket_progress": 1, "pity": 0},
        "exercise": {"coins": 0, "tickets": 0, "ticket_progress": 0, "pity": 0},
    }
    state[const.DATA_CATEGORY_COUNTS][child_id] = {"study": 1, "exercise": 0}
    state[const.DATA_OWNED_SKINS][child_id] = [const.DEFAULT_BUDDY_KEY]
    return state


def test_existing_items_win() -> None:
    """An id present on both sides keeps the current value."""
    current = _state_with_child("a", "Alice")
    incoming = _state_with_child("a", "Impostor")

    merged = MergeEngine.merge(current, incoming, TODAY)

    assert merged[const.DATA_CHILDREN]["a"][const.DATA_CHILD_NAME] == "Alice"
    # Inputs are not mutated
    assert incoming[const.DATA_CHILDREN]["a"][const.DATA_CHILD_NAME] == "Impostor"


def test_new_session_of_known_child_replays_deltas() -> None:
    """Wallet, counter and treasure deltas are replayed for known children."""
    current = _state_with_child("a", "Alice")
    current[const.DATA_SESSIONS]["s1"] = _session("s1", "a", "2025-04-06")
    incoming = _state_with_child("a", "Alice")
    incoming[const.DATA_SESSIONS]["s2"] = _session("s2", "a")

    merged = MergeEngine.merge(current, incoming, TODAY)

    assert set(merged[const.DATA_SESSIONS]) == {"s1", "s2"}
    assert merged[const.DATA_WALLETS]["a"]["study"]["coins"] == 20
    assert merged[const.DATA_WALLETS]["a"]["study"]["ticket_progress"] == 2
    assert merged[const.DATA_CATEGORY_COUNTS]["a"]["study"] == 2
    assert merged[const.DATA_TREASURE]["progress"] == 1
    assert merged[const.DATA_STREAKS]["a"]["current"] == 2
    assert merged[const.DATA_CHILDREN]["a"][const.DATA_CHILD_CURRENT_STREAK] == 2


def test_replayed_progress_rolls_over_into_ticket() -> None:
    """Replaying a session onto a wallet at 2 progress grants a ticket."""
    current = _state_with_child("a", "Alice")
    current[const.DATA_WALLETS]["a"]["study"]["ticket_progress"] = 2
    incoming = _state_with_child("a", "Alice")
    incoming[const.DATA_SESSIONS]["s2"] = _session("s2", "a")

    merged = MergeEngine.merge(current, incoming, TODAY)

    wallet = merged[const.DATA_WALLETS]["a"]["study"]
    assert wallet["ticket_progress"] == 0
    assert wallet["tickets"] == 1
    assert wallet["coins"] == 20


def test_new_child_keeps_imported_wallet() -> None:
    """A new child's wallet already includes its sessions; treasure still moves."""
    current = db.build_empty_state()
    incoming = _state_with_child("b", "Bob")
    incoming[const.DATA_SESSIONS]["s9"] = _session("s9", "b")

    merged = MergeEngine.merge(current, incoming, TODAY)

    assert merged[const.DATA_WALLETS]["b"]["study"]["coins"] == 10
    assert merged[const.DATA_CATEGORY_COUNTS]["b"]["study"] == 1
    assert merged[const.DATA_TREASURE]["progress"] == 1


def test_owned_skins_are_unioned() -> None:
    """List buckets merge without duplicates."""
    current = _state_with_child("a", "Alice")
    incoming = _state_with_child("a", "Alice")
    incoming[const.DATA_OWNED_SKINS]["a"].append(const.SKIN_ID_LULILOLI)

    merged = MergeEngine.merge(current, incoming, TODAY)

    assert merged[const.DATA_OWNED_SKINS]["a"] == [
        const.DEFAULT_BUDDY_KEY,
        const.SKIN_ID_LULILOLI,
    ]


def test_added_session_ids() -> None:
    """Only ids missing from the current snapshot count as added."""
    current = db.build_empty_state()
    current[const.DATA_SESSIONS]["old"] = _session("old", "a")
    incoming = {const.DATA_SESSIONS: {"old": {}, "new": {}}}

    assert MergeEngine.added_session_ids(current, incoming) == ["new"]
