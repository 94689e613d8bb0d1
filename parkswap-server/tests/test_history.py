import pytest

from app.db.models import Spot
from app.modules.history import HistoryService
from app.modules.history.models import swap_title, swap_transaction_id


@pytest.mark.parametrize(
    "host_name, booker_name, expected",
    [
        ("Hugo", "Bea", "Bea ➜ Hugo"),
        ("Hugo", "", "Hugo"),
        (None, "Bea", "Bea"),
        (None, None, "Swap"),
    ],
)
def test_swap_title(host_name, booker_name, expected):
    assert swap_title(host_name, booker_name) == expected


async def test_conclusion_is_counted_once(session, make_account):
    host = await make_account("history-host", display_name="Hugo")
    spot = Spot(host_id=host.id, host_name="Hugo", price="4,20", status="completed")
    session.add(spot)
    await session.flush()
    service = HistoryService.with_session(session)

    first = await service.upsert(spot, user_id=host.id, status="concluded", role="host")
    second = await service.upsert(spot, user_id=host.id, status="concluded", role="host")

    assert (first, second) == (True, False)
    await session.refresh(host)
    assert host.transactions == 1

    records = await service.list_for_user(host.id)
    assert len(records) == 1
    assert records[0].id == swap_transaction_id(spot.id, host.id)
    assert records[0].amount_cents == 420
    assert records[0].title == "Hugo"


async def test_upsert_without_user_is_ignored(session, make_account):
    host = await make_account("lonely-host")
    spot = Spot(host_id=host.id, status="available")
    session.add(spot)
    await session.flush()

    assert await HistoryService.with_session(session).upsert(spot, user_id=None, status="started", role="booker") is False
